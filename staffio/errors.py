from typing import Optional


class ValidationError(ValueError):
    """
    Raised when a value assigned to a field violates the field's validation rule.

    When raised through a model, `field` holds the qualified name of the field that
    rejected the value (e.g. `Employee.country`).
    """

    field: Optional[str]

    def __init__(self, message: str = "", field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DomainError(ValidationError):
    """
    The value is not a member of the closed set of values accepted by the field.
    """


class RangeError(ValidationError):
    """
    The value is outside of the numeric range accepted by the field.
    """


class AgeError(ValidationError):
    """
    The date does not satisfy the minimum age requirement.
    """


class TemporalError(ValidationError):
    """
    The date is not acceptable relative to the current time.
    """


class PreconditionError(ValueError):
    """
    Raised when a computation depends on a value that is not available.
    """


class UnsetFieldError(PreconditionError):
    def __init__(self, field: str):
        super().__init__(f"Field `{field}` has not been set.")
        self.field = field
