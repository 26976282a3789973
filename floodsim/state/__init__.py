"""State machine support for simulation entities.

Exports:
    StateMachine: Finite state machine with transition validation
    State: Type variable for state enumerations
    Action: Transition into a state with an optional effect
    ActionFn: Effect callable type
    StateGraph: Transition graph type
"""

from .state_machine import Action, ActionFn, State, StateGraph, StateMachine

__all__ = ["StateMachine", "State", "Action", "StateGraph", "ActionFn"]
