import os

import invoke
from invoke import Argument, Exit

from . import builds
from .config import Config
from .executor import Executor
from .util import debug


class Program(invoke.Program):
    """
    The ``staticflow`` CLI: invoke's task runner, with bundled pipelines.

    A ``pipeline.py`` found by walking up from the current directory wins;
    without one (or with ``--variant``) a bundled pipeline runs instead, so
    a bare ``staticflow`` in a directory holding ``src/`` builds ``out/``.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("config_class", Config)
        kwargs.setdefault("executor_class", Executor)
        super().__init__(**kwargs)

    def task_args(self):
        names = ", ".join(sorted(builds.variants))
        return super().task_args() + [
            Argument(
                names=("variant",),
                help="Use a bundled pipeline ({}) instead of a pipeline module.".format(  # noqa
                    names
                ),
            )
        ]

    def load_collection(self):
        variant = self.args.variant.value
        if variant is None:
            try:
                return super().load_collection()
            except Exit:
                # An explicitly named collection must exist.
                if self.args.collection.value is not None:
                    raise
            # Runtime file & env levels are otherwise only loaded later on.
            self.update_config()
            self.config.load_shell_env()
            variant = self.config.tasks.variant
            debug("No pipeline module found, using {!r}".format(variant))
        self.load_variant(variant)

    def load_variant(self, name):
        """
        Use the bundled pipeline ``name``, with project config from the
        current directory.
        """
        try:
            collection = builds.variants[name]
        except KeyError:
            err = "Unknown variant {!r}! Valid variants: {}"
            raise Exit(err.format(name, ", ".join(sorted(builds.variants))))
        self.config.set_project_location(os.getcwd())
        self.config.load_project()
        self.collection = collection
