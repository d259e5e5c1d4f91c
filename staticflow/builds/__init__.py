"""
Pipelines bundled with staticflow, selectable with ``--variant``.
"""

from invoke import Collection

from . import extended, minimal

#: Bundled collections by variant name.
variants = {
    "minimal": Collection.from_module(minimal),
    "extended": Collection.from_module(extended),
}
