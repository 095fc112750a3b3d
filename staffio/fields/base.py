import inspect
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Generic, Optional, Type, TypeVar, Union

from staffio.errors import UnsetFieldError, ValidationError
from staffio.state import Transition

if TYPE_CHECKING:
    from staffio.model import BaseModel


logger = logging.getLogger(__name__)

Model_co = TypeVar("Model_co", bound="BaseModel", covariant=True)
T_co = TypeVar("T_co", bound=object, covariant=True)


def _check_field_value_type(
    type_: Type, name: str, value: T_co, allow_none: bool = False
):
    if allow_none and value is None:
        return

    # bool is a subclass of int, but never a valid value for a numeric field
    if isinstance(value, bool) and type_ is not bool:
        raise TypeError(f"Value of `{name}` should be of type {type_.__name__}")

    if not isinstance(value, type_):
        raise TypeError(f"Value of `{name}` should be of type {type_.__name__}")


class MISSING:
    pass


class InvalidPolicy(Enum):
    """
    Indicates what happens when a value assigned to a field fails validation.

    - RAISE: The ValidationError propagates to the caller and the stored value is left
      untouched.
    - RESET: The error is swallowed and the field default is stored instead. Fields
      with this policy must declare a default.
    """

    RAISE = auto()
    RESET = auto()


SetterType = Callable[[Model_co, T_co], T_co]

# Base fields


class Field(Generic[T_co], object):
    """
    Base type for Fields.

    A Field is a data descriptor that validates every value assigned to it. The value
    goes through `_coerce` (conversion from raw input, e.g. a string into a date), the
    type check and finally the setter hook, which can transform the value or reject it
    by raising a ValidationError. What happens to a rejected value depends on the
    `on_invalid` policy of the field.
    """

    type_: Type[T_co]
    name: str
    init: bool
    allow_none: bool
    on_invalid: InvalidPolicy
    error: Type[ValidationError]
    repr: bool
    type_check: bool

    _default: Optional[T_co]
    _default_factory: Optional[Callable[[], T_co]]
    _setter: Optional[SetterType]

    def __init__(
        self,
        type_: Type[T_co],
        *,
        allow_none: bool,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        init: bool = True,
        default: Union[Optional[T_co], Type[MISSING]] = MISSING,
        default_factory: Union[Optional[Callable[[], T_co]], Type[MISSING]] = MISSING,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
    ):
        if default is MISSING and default_factory is MISSING:
            if allow_none:
                default = None

        if default is not MISSING and default_factory is not MISSING:
            raise ValueError(
                "Default value for field provided for both `default` and"
                " `default_factory`"
            )

        self.type_ = type_
        self._default = default
        self._default_factory = default_factory
        self.init = init
        self.allow_none = allow_none
        self.on_invalid = on_invalid
        self.error = error
        self.setter(setter)
        self.repr = repr
        self.type_check = type_check

        if self.on_invalid is InvalidPolicy.RESET and not self.has_default:
            raise ValueError("Fields with the RESET policy require a default value.")

    def __set_name__(self, owner, name: str):
        self.name = name

    def __set__(self, instance: "BaseModel", value: T_co):
        try:
            checked = self._check_value(instance, value)
        except ValidationError as error:
            field_name = self._field_name(instance)
            if error.field is None:
                error.field = field_name

            if self.on_invalid is InvalidPolicy.RAISE:
                logger.debug("Rejected value for `%s`: %s", field_name, error)
                instance._transition_field(self, Transition.REJECT)
                raise

            logger.debug("Reset `%s` to its default: %s", field_name, error)
            instance.__dict__[self.name] = self.default
            instance._transition_field(self, Transition.RESET)
            instance._reset(self, value)
            return

        instance.__dict__[self.name] = checked
        instance._transition_field(self, Transition.ACCEPT)
        instance._update(self, checked)

    def __get__(self, instance: "BaseModel", cls=None) -> T_co:
        if instance is None:
            return self

        self._store_default(instance, force=False)

        if self.name not in instance.__dict__:
            raise UnsetFieldError(self._field_name(instance))

        return instance.__dict__[self.name]

    def __delete__(self, instance: "BaseModel") -> None:
        if self.name not in instance.__dict__:
            raise AttributeError(
                f"Field `{self._field_name(instance)}` has not been set."
            )

        del instance.__dict__[self.name]
        instance._transition_field(self, Transition.CLEAR)

    def _store_default(self, instance: "BaseModel", force=False):
        if not self.has_default:
            return

        if self.name not in instance.__dict__ or force:
            instance.__dict__[self.name] = self.default

    def _check_value(self, instance: "BaseModel", value: T_co) -> T_co:
        if value is not None:
            value = self._coerce(instance, value)

        if self.type_check:
            _check_field_value_type(
                self.type_,
                self._field_name(instance),
                value,
                allow_none=self.allow_none,
            )
        return self._setter(instance, value) if self._setter is not None else value

    def _coerce(self, instance: "BaseModel", value: T_co) -> T_co:
        """
        Converts raw input into the type of the field. Input that cannot be converted
        is returned untouched so that the type check reports it, unless the input is
        of the right kind but malformed, in which case `self.error` is raised.
        """
        return value

    @property
    def default(self) -> T_co:
        """
        Extracts the default value of the field.

        :raises ValueError: When no default value has been set during initialization.
        :return: The default value.
        """
        if not self.has_default:
            raise ValueError(
                f"Can't initialize field {self.name}: default value not provided."
            )

        return (
            self._default_factory()
            if self._default_factory is not MISSING
            else self._default
        )

    @property
    def has_default(self) -> bool:
        """
        Indicates if the field has a default value set during the initialization.

        :return: True if a default value has been set, False otherwise.
        """
        return self._default is not MISSING or self._default_factory is not MISSING

    def setter(self, method: Optional[SetterType]):
        """
        Defines the setter function `method` for the current field. `method` is
        triggered whenever a value is assigned to the field, after the value has been
        coerced and type checked.

        :param method: The method to be called for setting the value. Method should
                       accept 2 parameters and must return the value to be assigned
                       to the field. The first parameter will contain the instance
                       from which the setter was called, and the second will contain
                       the value assigned. Invalid values are rejected by raising a
                       ValidationError.
        :raises ValueError: When the signature of `method` is incorrect.
        :return: The decorated `method`.
        """
        if method is not None:
            signature = inspect.signature(method).parameters
            if len(signature) != 2:
                raise ValueError(
                    f"The provided setter {method.__name__} should accept exactly 2"
                    " parameters."
                )
        self._setter = method
        return method

    def _field_name(self, instance: "BaseModel") -> str:
        return f"{instance.__class__.__name__}.{self.name}"
