from enum import IntEnum, auto
from typing import Dict, Tuple


class FieldState(IntEnum):
    """
    Contains the state of each field within a model instance.

    - UNSET indicates that no value has been assigned to the field, or that the last
    assigned value has been deleted. The field has no value unless it declares a
    default.
    - SET indicates that the last value assigned to the field has been accepted by its
    validation rule and is currently stored.
    - RESET indicates that the last value assigned to the field has been rejected, and
    the field holds its default value as a consequence of its reset policy.

    Fields that raise on invalid values never reach RESET: a rejected value leaves the
    field in whatever state it was before.
    """

    UNSET = auto()
    SET = auto()
    RESET = auto()


class Transition(IntEnum):
    """
    Contains the possible outcomes of an assignment to a field. It is used by the
    FieldStateMachine and the fields to figure out the next state of a field.
    """

    ACCEPT = auto()
    RESET = auto()
    REJECT = auto()
    CLEAR = auto()


class FieldStateMachine:
    """
    Statically defines all possible resulting states of a field with current state
    FieldState going through a transition Transition.
    """

    _transitions: Dict[Tuple[Transition, FieldState], FieldState] = {
        (Transition.ACCEPT, FieldState.UNSET): FieldState.SET,
        (Transition.ACCEPT, FieldState.SET): FieldState.SET,
        (Transition.ACCEPT, FieldState.RESET): FieldState.SET,
        (Transition.RESET, FieldState.UNSET): FieldState.RESET,
        (Transition.RESET, FieldState.SET): FieldState.RESET,
        (Transition.RESET, FieldState.RESET): FieldState.RESET,
        (Transition.CLEAR, FieldState.UNSET): FieldState.UNSET,
        (Transition.CLEAR, FieldState.SET): FieldState.UNSET,
        (Transition.CLEAR, FieldState.RESET): FieldState.UNSET,
    }

    @classmethod
    def transition(
        cls, transition: Transition, current_state: FieldState
    ) -> FieldState:
        """
        Maps the Transition `transition` from `current_state` to a new FieldState.

        :param transition: The outcome of the assignment.
        :param current_state: The current FieldState of the field.
        :return: The resulting field state after the transition.
        """
        key = (transition, current_state)
        return cls._transitions.get(key, current_state)
