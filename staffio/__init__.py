from .clock import Clock, FixedClock, SystemClock
from .employee import Department, EducationLevel, Employee
from .errors import (
    AgeError,
    DomainError,
    PreconditionError,
    RangeError,
    TemporalError,
    UnsetFieldError,
    ValidationError,
)
from .event import EventListener
from .model import BaseModel
from .state import FieldState, FieldStateMachine, Transition

__name__ = "staffio"
__version__ = "0.1.0"
__author__ = "staffio contributors"
__email__ = "staffio@users.noreply.github.com"

__all__ = [
    'BaseModel',
    'Employee',
    'Department',
    'EducationLevel',
    'Clock',
    'SystemClock',
    'FixedClock',
    'EventListener',
    'FieldState',
    'FieldStateMachine',
    'Transition',
    'ValidationError',
    'DomainError',
    'RangeError',
    'AgeError',
    'TemporalError',
    'PreconditionError',
    'UnsetFieldError',
]
