import logging
import os

from invoke.util import enable_logging


# Allow from-the-start debugging (vs toggled by ``--debug`` once the CLI has
# been parsed) via shell env var.
if os.environ.get("STATICFLOW_DEBUG"):
    enable_logging()

log = logging.getLogger("staticflow")
debug = log.debug
