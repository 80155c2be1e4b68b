"""State-change notifications of nonlinear elements.

Elements compare their state flags before and after a commit and append one
:class:`StateChange` per newly set flag to an :class:`EventLog`. The analysis
driver drains the log once per converged load step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional


class ElementState(Enum):
    CONCRETE_CRACKED = "concrete cracked"
    CONCRETE_CRUSHED = "concrete crushed"
    CONCRETE_YIELDED = "concrete yielded"
    STEEL_YIELDED = "steel yielded"


@dataclass(frozen=True)
class StateChange:
    element: int
    state: ElementState
    load_step: Optional[int] = None

    def describe(self) -> str:
        step = "n/a" if self.load_step is None else str(self.load_step)
        return f"stringer {self.element}: {self.state.value} at load step {step}"


class EventLog:
    """Collected state changes plus optional subscribers."""

    def __init__(self):
        self.events: List[StateChange] = []
        self._callbacks: List[Callable[[StateChange], Any]] = []

    def subscribe(self, callback: Callable[[StateChange], Any]) -> None:
        self._callbacks.append(callback)

    def emit(self, event: StateChange) -> None:
        self.events.append(event)
        for cb in self._callbacks:
            cb(event)

    def drain(self) -> List[StateChange]:
        """Return and clear the pending events."""
        out = list(self.events)
        self.events.clear()
        return out

    def __len__(self) -> int:
        return len(self.events)
