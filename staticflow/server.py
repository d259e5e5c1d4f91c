"""
Static HTTP serving of a built output tree, via werkzeug.
"""

import os
from typing import Any, Callable, Iterable, Optional

from invoke.util import ExceptionHandlingThread, ExceptionWrapper
from werkzeug.exceptions import NotFound
from werkzeug.middleware.shared_data import SharedDataMiddleware
from werkzeug.serving import make_server

from .util import debug


class IndexMiddleware:
    """
    Map directory-style request paths (ending in ``/``) to ``index.html``.
    """

    def __init__(self, app: Callable, index: str = "index.html") -> None:
        self.app = app
        self.index = index

    def __call__(self, environ: dict, start_response: Callable) -> Iterable:
        path = environ.get("PATH_INFO") or "/"
        if path.endswith("/"):
            environ["PATH_INFO"] = path + self.index
        return self.app(environ, start_response)


def make_app(root: str, base_path: str = "/") -> Callable:
    """
    Build a WSGI app exposing the files below ``root`` at ``base_path``.

    Anything not found on disk gets a 404.
    """
    if not base_path.startswith("/"):
        base_path = "/" + base_path
    exports = {base_path: os.path.abspath(root)}
    return IndexMiddleware(SharedDataMiddleware(NotFound(), exports))


class StaticServer:
    """
    Threaded static file server for an output directory.

    The listening socket is bound at construction time, so a port already in
    use surfaces as an `OSError` right away instead of inside the background
    thread. Pass ``port=0`` to let the OS pick one; the actual port is then
    available as `port`.
    """

    def __init__(
        self,
        root: str,
        host: str = "127.0.0.1",
        port: int = 7878,
        base_path: str = "/",
    ) -> None:
        self.root = root
        self.host = host
        self.base_path = base_path
        self.app = make_app(root, base_path)
        try:
            self.server = make_server(host, port, self.app, threaded=True)
        except SystemExit as e:
            # werkzeug prints bind errors to stderr and exits.
            msg = "Unable to serve on {}:{}".format(host, port)
            raise OSError(msg) from e
        self.thread: Optional[ExceptionHandlingThread] = None

    def __repr__(self) -> str:
        return "<{} {!r} at {}>".format(
            self.__class__.__name__, self.root, self.url
        )

    @property
    def port(self) -> int:
        return self.server.server_port

    @property
    def url(self) -> str:
        return "http://{}:{}{}".format(self.host, self.port, self.base_path)

    def start(self) -> None:
        """
        Begin serving in a background (daemon) thread.
        """
        debug("Serving {!r} at {}".format(self.root, self.url))
        self.thread = ExceptionHandlingThread(
            target=self.server.serve_forever, name="staticflow-server"
        )
        self.thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Shut the server down & close its socket.
        """
        if self.thread is None:
            self.server.server_close()
            return
        if self.thread.is_alive():
            self.server.shutdown()
        self.thread.join(timeout)
        debug("Stopped serving {!r}".format(self.root))

    @property
    def is_dead(self) -> bool:
        return self.thread is not None and self.thread.is_dead

    def exception(self) -> Optional[ExceptionWrapper]:
        """
        Return the server thread's `.ExceptionWrapper`, if it died.
        """
        if self.thread is None:
            return None
        return self.thread.exception()

    def __enter__(self) -> "StaticServer":
        self.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()
