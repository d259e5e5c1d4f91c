"""
Pipeline tasks: invoke tasks that announce themselves & report failures.
"""

import time

import invoke
from invoke import Context

from .exceptions import TaskFailure
from .util import debug


class Task(invoke.Task):
    """
    An `invoke.Task` printing gulp-style start/finish lines.

    With ``tasks.echo`` enabled, each run prints ``Starting 'name'...`` and
    ``Finished 'name' after N ms``. Anything the body raises (other than
    invoke's `~invoke.exceptions.Exit` family) is re-raised as
    `.TaskFailure`, so the CLI exits non-zero with a one-line message.
    """

    def __call__(self, *args, **kwargs):
        if not args or not isinstance(args[0], Context):
            # invoke raises its own TypeError for context-less calls
            return super().__call__(*args, **kwargs)
        echo = _echo(args[0])
        if echo:
            print("Starting {!r}...".format(self.name), flush=True)
        start = time.monotonic()
        try:
            result = super().__call__(*args, **kwargs)
        except invoke.Exit:
            raise
        except Exception as e:
            debug("Task {!r} raised {!r}".format(self.name, e))
            raise TaskFailure(self.name, e) from e
        if echo:
            elapsed = int((time.monotonic() - start) * 1000)
            msg = "Finished {!r} after {} ms".format(self.name, elapsed)
            print(msg, flush=True)
        return result


def _echo(c):
    try:
        return c.config.tasks.echo
    except AttributeError:
        return False


def task(*args, **kwargs):
    """
    `invoke.task`, building `.Task` objects unless ``klass`` says otherwise.
    """
    kwargs.setdefault("klass", Task)
    return invoke.task(*args, **kwargs)
