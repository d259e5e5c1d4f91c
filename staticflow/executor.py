import invoke
from invoke import Call

from .exceptions import CyclicDependency
from .util import debug


class Executor(invoke.Executor):
    """
    invoke's executor, refusing to run task graphs that loop back on
    themselves.
    """

    def execute(self, *tasks):
        """
        Check the pre/post graph of ``tasks`` for cycles, then run them.

        :raises:
            `.CyclicDependency` naming the offending path; nothing is executed
            in that case.
        """
        self.check_cycles(self.normalize(tasks))
        return super().execute(*tasks)

    def check_cycles(self, calls, _chain=()):
        """
        Walk the pre/post tasks of ``calls`` depth-first, raising
        `.CyclicDependency` when a task is reachable from itself.

        Diamonds (two tasks sharing a prerequisite) are fine.
        """
        for call in calls:
            task = call.task if isinstance(call, Call) else call
            if any(task is x for x in _chain):
                path = [x.name for x in _chain] + [task.name]
                debug("Cycle in task graph: {!r}".format(path))
                raise CyclicDependency(path)
            chain = _chain + (task,)
            self.check_cycles(task.pre, chain)
            self.check_cycles(task.post, chain)
