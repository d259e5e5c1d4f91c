from typing import Any, Dict

from invoke import Config as BaseConfig
from invoke.config import merge_dicts


class Config(BaseConfig):
    """
    invoke's layered configuration, with staticflow's own settings on top.

    Files are named ``staticflow.(yaml|yml|json|py)`` (e.g.
    ``/etc/staticflow.yaml``, ``~/.staticflow.yaml`` and a project-level
    ``staticflow.yaml`` beside the pipeline module) and environment variables
    are prefixed ``STATICFLOW_``, e.g. ``STATICFLOW_SERVE_PORT=9000``.
    """

    prefix = "staticflow"

    @staticmethod
    def global_defaults() -> Dict[str, Any]:
        """
        Return invoke's defaults merged with the pipeline settings.

        ``tasks.collection_name`` becomes ``pipeline``, so the module looked
        for on disk is ``pipeline.py``; ``tasks.variant`` names the bundled
        pipeline used when no such module is found.
        """
        ours = {
            "paths": {"source": "src", "output": "out"},
            "build": {"patterns": ["**/*"], "dotfiles": False},
            "fingerprint": {
                "extensions": [".js", ".css"],
                "length": 10,
                "manifest": None,
            },
            "rewrite": {
                "extensions": [".html", ".htm", ".css", ".js", ".hbs"],
            },
            "serve": {"host": "127.0.0.1", "port": 7878, "base_path": "/"},
            "watch": {"debounce": 0.1, "polling": False, "poll_interval": 1.0},
            "tasks": {
                "collection_name": "pipeline",
                "echo": True,
                "variant": "minimal",
            },
        }
        return merge_dicts(BaseConfig.global_defaults(), ours)
