__all__ = (
    "ChangeEvent",
    "Config",
    "CyclicDependency",
    "Executor",
    "FileRecord",
    "Program",
    "StaticServer",
    "Task",
    "TaskFailure",
    "Watcher",
    "__version__",
    "__version_info__",
    "task",
)


from ._version import __version__, __version_info__
from .config import Config
from .exceptions import CyclicDependency, TaskFailure
from .executor import Executor
from .files import FileRecord
from .program import Program
from .server import StaticServer
from .tasks import Task, task
from .watcher import ChangeEvent, Watcher
