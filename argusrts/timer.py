"""Timers stored on an entity's timer component and the handles that refer to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .entity import Entity

# Timer indices are stored in a single byte; 255 is reserved for "unassigned".
MAX_TIMERS = 255


class TimerState(Enum):
    NOT_SET = 0
    TICKING = 1
    COMPLETED = 2


@dataclass
class Timer:
    time_remaining_seconds: float = 0.0
    timer_state: TimerState = TimerState.NOT_SET


@dataclass
class TimerComponent:
    """The timers owned by one entity; slots are reused once released."""

    timers: List[Timer] = field(default_factory=list)

    def timer_from_handle(self, handle: "TimerHandle") -> Optional[Timer]:
        """Return the timer the handle refers to, or None if it refers to none."""
        index = handle.timer_index
        if index is None or not 0 <= index < len(self.timers):
            return None
        return self.timers[index]


class TimerHandle:
    """Refers to one timer slot in an entity's :class:`TimerComponent`."""

    __slots__ = ("_timer_index",)

    def __init__(self) -> None:
        self._timer_index: Optional[int] = None

    @property
    def timer_index(self) -> Optional[int]:
        """The slot this handle refers to, or None when unassigned."""
        return self._timer_index

    def __repr__(self) -> str:
        return f"TimerHandle(timer_index={self._timer_index})"

    def start_timer(self, entity: "Entity", seconds: float) -> None:
        """Start a ticking timer on the entity and bind this handle to it."""
        if self._timer_index is not None:
            raise RuntimeError("Attempting to start a timer on a TimerHandle that is already assigned.")

        component = _timer_component(entity)
        for index, timer in enumerate(component.timers):
            if timer.timer_state is TimerState.NOT_SET:
                timer.timer_state = TimerState.TICKING
                timer.time_remaining_seconds = seconds
                self._timer_index = index
                return

        if len(component.timers) >= MAX_TIMERS:
            raise OverflowError(f"Entity {entity.id} already has the maximum of {MAX_TIMERS} timers.")
        component.timers.append(Timer(seconds, TimerState.TICKING))
        self._timer_index = len(component.timers) - 1

    def finish_timer_handling(self, entity: "Entity") -> None:
        """Release a completed timer; a timer still ticking is left alone."""
        timer = self._timer(entity)
        if timer.timer_state is not TimerState.COMPLETED:
            return
        self._release(timer)

    def cancel_timer(self, entity: "Entity") -> None:
        """Release the timer whatever its state."""
        self._release(self._timer(entity))

    def is_timer_complete(self, entity: "Entity") -> bool:
        if self._timer_index is None:
            return False
        return self._timer(entity).timer_state is TimerState.COMPLETED

    def _release(self, timer: Timer) -> None:
        timer.time_remaining_seconds = 0.0
        timer.timer_state = TimerState.NOT_SET
        self._timer_index = None

    def _timer(self, entity: "Entity") -> Timer:
        component = _timer_component(entity)
        timer = component.timer_from_handle(self)
        if timer is None:
            raise LookupError(f"Could not retrieve a timer from the TimerComponent of entity {entity.id}.")
        return timer


def _timer_component(entity: "Entity") -> TimerComponent:
    if not entity:
        raise ValueError("Passed in entity is invalid when trying to retrieve its TimerComponent.")
    component = entity.get_component(TimerComponent)
    if component is None:
        raise LookupError(f"Could not find a TimerComponent associated with entity {entity.id}.")
    return component