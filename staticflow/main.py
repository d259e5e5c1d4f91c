"""
Staticflow's own 'binary' entrypoint.
"""

from . import Program, __version__

program = Program(
    name="Staticflow",
    binary="staticflow",
    version=__version__,
)
