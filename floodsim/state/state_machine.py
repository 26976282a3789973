"""Finite state machine with validated transitions.

Agents use it to move between ``IDLE`` and ``PURSUING``; any transition that
is not declared in the graph raises ``ValueError`` so a bookkeeping mistake
in the tick logic surfaces immediately instead of corrupting counts.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

State = TypeVar("State", bound=Enum)
"""Type variable for state enumerations."""

ActionFn = Callable[..., Any]
"""Effect executed when a transition fires."""

StateGraph = Mapping[Enum, Iterable["Action"]]
"""Allowed transitions: source state -> actions leading out of it."""


@dataclass(frozen=True)
class Action:
    """A transition into ``state`` with an optional effect.

    Attributes:
        state: Target state.
        effect: Called with the arguments passed to
            :meth:`StateMachine.request_transition`.
    """

    state: Enum
    effect: ActionFn | None = None

    def __call__(self, *args, **kwargs) -> Any:
        if self.effect:
            return self.effect(*args, **kwargs)
        return None


class StateMachine:
    """Tracks the current state and enforces the transition graph.

    Attributes:
        _state: Current state.
        _allowed: Transition graph.

    Example:
        >>> class Light(Enum):
        ...     OFF = 0
        ...     ON = 1
        >>> sm = StateMachine(Light.OFF, {Light.OFF: [Action(Light.ON)], Light.ON: [Action(Light.OFF)]})
        >>> sm.request_transition(Light.ON)
        >>> sm.current
        <Light.ON: 1>
    """

    def __init__(self, initial_state: Enum, nodes_graph: StateGraph):
        self._state = initial_state
        self._allowed = nodes_graph

    @property
    def current(self) -> Enum:
        return self._state

    def can_transition(self, to: Enum) -> bool:
        return any(action.state == to for action in self._allowed.get(self._state, ()))

    def request_transition(self, next_state: Enum, *args, **kwargs) -> Any:
        """Move to ``next_state`` and run the transition's effect.

        Returns:
            Whatever the effect returns, or ``None``.

        Raises:
            ValueError: If the graph has no edge from the current state to
                ``next_state``.
        """
        action = self._validate_transition(self._state, next_state)
        self._state = action.state
        return action(*args, **kwargs)

    def _validate_transition(self, frm: Enum, to: Enum) -> Action:
        for action in self._allowed.get(frm, ()):
            if action.state == to:
                return action
        msg = f"Illegal transition {frm.name} → {to.name}"
        raise ValueError(msg)
