"""
Fingerprinting pipeline with a development server:
``clean`` -> ``build`` -> ``apimocker`` -> ``default``.
"""

from ..files import clean as clean_tree, read_tree, write_tree
from ..fingerprint import fingerprint, manifest, rewrite_references
from ..server import StaticServer
from ..tasks import task
from ..watcher import Watcher


@task
def clean(c):
    """
    Delete the output directory.
    """
    clean_tree(c.paths.output)


@task(clean)
def build(c):
    """
    Copy the source tree, fingerprinting scripts & stylesheets.

    References to renamed files are rewritten in markup, stylesheets and
    scripts. Returns the rename map.
    """
    records = read_tree(
        c.paths.source, c.build.patterns, dotfiles=c.build.dotfiles
    )
    records, renames = fingerprint(
        records, c.fingerprint.extensions, c.fingerprint.length
    )
    records = rewrite_references(records, renames, c.rewrite.extensions)
    if c.fingerprint.manifest:
        records.append(manifest(renames, c.fingerprint.manifest))
    write_tree(records, c.paths.output)
    return renames


@task(build, aliases=("serve",), help={"port": "Port to serve on."})
def apimocker(c, port=None):
    """
    Serve the output directory & rebuild whenever sources change.

    Runs until interrupted.
    """
    port = c.serve.port if port is None else int(port)
    server = StaticServer(
        c.paths.output,
        host=c.serve.host,
        port=port,
        base_path=c.serve.base_path,
    )

    def rebuild():
        clean(c)
        build(c)

    watcher = Watcher(
        c.paths.source,
        rebuild,
        debounce=c.watch.debounce,
        polling=c.watch.polling,
        poll_interval=c.watch.poll_interval,
    )
    server.start()
    print("Serving {} at {}".format(c.paths.output, server.url), flush=True)
    try:
        watcher.run(server=server)
    finally:
        server.stop()


@task(apimocker, default=True)
def default(c):
    """
    Build, serve & watch.
    """
    pass
