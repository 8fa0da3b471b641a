"""
ResolutionContext

This module provides the bookkeeping for dependency resolution.
The ResolutionContext tracks which service names are currently being
resolved so that circular references can be detected and reported with
the full chain of services involved.

Each container owns its own context. There is no process-wide state.
"""

from enum import Enum
from typing import Dict, Iterator, List
from contextlib import contextmanager


class VisitState(Enum):
    """Visitation state of a service name"""
    UNVISITED = "UNVISITED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class ResolutionContext:
    """Three-state visitation map keyed by service name.

    Names marked ``IN_PROGRESS`` form the loading set. Their order of
    entry is kept so a detected cycle can be reported as a chain. States
    only live for one traversal: once the outermost name completes (or is
    abandoned) every name is ``UNVISITED`` again.

    Example (internal usage)::

        ctx = ResolutionContext()
        ctx.enter('a')
        ctx.enter('b')
        ctx.is_loading('a')     # True
        ctx.loading_chain()     # ['a', 'b']
        ctx.complete('b')
        ctx.state_of('b')       # VisitState.DONE
        ctx.complete('a')
        ctx.state_of('b')       # VisitState.UNVISITED
    """

    def __init__(self):
        self._states: Dict[str, VisitState] = {}
        self._loading: Dict[str, None] = {}  # Ordered set of IN_PROGRESS names

    def state_of(self, name: str) -> VisitState:
        return self._states.get(name, VisitState.UNVISITED)

    def is_loading(self, name: str) -> bool:
        return self.state_of(name) is VisitState.IN_PROGRESS

    def is_idle(self) -> bool:
        """True when no resolution is currently running."""
        return not self._loading

    def loading_chain(self) -> List[str]:
        return list(self._loading)

    def enter(self, name: str) -> None:
        self._states[name] = VisitState.IN_PROGRESS
        self._loading[name] = None

    def complete(self, name: str) -> None:
        self._loading.pop(name, None)
        self._states[name] = VisitState.DONE
        self._end_traversal_if_idle()

    def abandon(self, name: str) -> None:
        """Forget a name whose resolution failed."""
        if name in self._loading:
            del self._loading[name]
            self._states.pop(name, None)
        self._end_traversal_if_idle()

    def clear(self) -> None:
        """Drop the whole traversal, e.g. after a detected cycle."""
        self._loading.clear()
        self._states.clear()

    def _end_traversal_if_idle(self) -> None:
        if not self._loading:
            self._states.clear()

    @contextmanager
    def visiting(self, name: str) -> Iterator[None]:
        """Mark ``name`` in progress for the duration of the block."""
        self.enter(name)
        try:
            yield
        except BaseException:
            self.abandon(name)
            raise
        self.complete(name)
