"""
Copy-only pipeline: ``clean`` -> ``build`` -> ``default``.
"""

from ..files import clean as clean_tree, read_tree, write_tree
from ..tasks import task


@task
def clean(c):
    """
    Delete the output directory.
    """
    clean_tree(c.paths.output)


@task(clean)
def build(c):
    """
    Copy the source tree into a fresh output directory.
    """
    records = read_tree(
        c.paths.source, c.build.patterns, dotfiles=c.build.dotfiles
    )
    write_tree(records, c.paths.output)
    return [x.path for x in records]


@task(build, default=True)
def default(c):
    """
    Run the build.
    """
    pass
