"""
Custom exception classes.

Both subclass invoke's `~invoke.exceptions.Exit`, so ``Program.run`` prints
their message to stderr and exits with status 1 instead of dumping a
traceback.
"""

from invoke.exceptions import Exit


class TaskFailure(Exit):
    """
    Exception subclass representing failure of a task's execution.

    Two attributes allow introspection to determine the nature of the problem:

    * ``task``: the name of the failing task.
    * ``reason``: the exception instance raised from inside the task body,
      typically an `OSError` from the filesystem or a server bind attempt.
    """

    def __init__(self, task, reason):
        msg = "Task {!r} failed: {}".format(task, reason)
        super().__init__(message=msg, code=1)
        self.task = task
        self.reason = reason

    def __str__(self):
        return self.message

    def __repr__(self):
        return "<{}: {!r} ({!r})>".format(
            self.__class__.__name__, self.task, self.reason
        )


class CyclicDependency(Exit):
    """
    A task's pre- or post-tasks lead back to the task itself.

    ``path`` holds the task names visited, ending with the repeated one.
    """

    def __init__(self, path):
        self.path = list(path)
        msg = "Dependency cycle detected: {}".format(" -> ".join(self.path))
        super().__init__(message=msg, code=1)

    def __str__(self):
        return self.message
