import enum
import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Callable, Generic, Optional, Type, TypeVar, Union

from staffio.errors import ValidationError
from staffio.fields.base import MISSING, Field, InvalidPolicy, SetterType

if TYPE_CHECKING:
    from staffio.model import BaseModel

# Constructors are mostly copy-pasted in this file so autocompletion support is more
# user friendly in any IDE


class IntField(Field[int]):
    def __init__(
        self,
        *,
        init: bool = True,
        default: Union[Optional[int], Type[MISSING]] = MISSING,
        default_factory: Union[Optional[Callable[[], int]], Type[MISSING]] = MISSING,
        allow_none: bool = False,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
    ) -> None:
        super().__init__(
            type_=int,
            init=init,
            default=default,
            default_factory=default_factory,
            allow_none=allow_none,
            on_invalid=on_invalid,
            error=error,
            setter=setter,
            repr=repr,
            type_check=type_check,
        )


class StrField(Field[str]):
    def __init__(
        self,
        *,
        init: bool = True,
        default: Union[Optional[str], Type[MISSING]] = MISSING,
        default_factory: Union[Optional[Callable[[], str]], Type[MISSING]] = MISSING,
        allow_none: bool = False,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
    ) -> None:
        super().__init__(
            type_=str,
            init=init,
            default=default,
            default_factory=default_factory,
            allow_none=allow_none,
            on_invalid=on_invalid,
            error=error,
            setter=setter,
            repr=repr,
            type_check=type_check,
        )


class DecimalField(Field[Decimal]):
    """
    Field holding a finite Decimal. Integers, floats and numeric strings are converted
    on assignment; floats go through their shortest repr so that `0.1` becomes
    `Decimal("0.1")` and not its binary approximation.
    """

    def __init__(
        self,
        *,
        init: bool = True,
        default: Union[Optional[Decimal], Type[MISSING]] = MISSING,
        default_factory: Union[
            Optional[Callable[[], Decimal]], Type[MISSING]
        ] = MISSING,
        allow_none: bool = False,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
    ) -> None:
        super().__init__(
            type_=Decimal,
            init=init,
            default=default,
            default_factory=default_factory,
            allow_none=allow_none,
            on_invalid=on_invalid,
            error=error,
            setter=setter,
            repr=repr,
            type_check=type_check,
        )

    def _coerce(self, instance: "BaseModel", value):
        if isinstance(value, bool):
            return value

        if isinstance(value, float):
            if not math.isfinite(value):
                raise self.error(
                    f"Value of `{self._field_name(instance)}` is not finite."
                )
            return Decimal(repr(value))

        if isinstance(value, int):
            return Decimal(value)

        if isinstance(value, str):
            try:
                value = Decimal(value.strip())
            except InvalidOperation:
                raise self.error(
                    f"Value of `{self._field_name(instance)}` is not a number:"
                    f" {value!r}"
                ) from None

        if isinstance(value, Decimal) and not value.is_finite():
            raise self.error(
                f"Value of `{self._field_name(instance)}` is not finite."
            )

        return value


class DateField(Field[date]):
    """
    Field holding a calendar date. Accepts `date` objects, `datetime` objects (only the
    date part is kept) and ISO-8601 strings. Strings that can't be parsed raise the
    `error` of the field.
    """

    def __init__(
        self,
        *,
        init: bool = True,
        default: Union[Optional[date], Type[MISSING]] = MISSING,
        default_factory: Union[Optional[Callable[[], date]], Type[MISSING]] = MISSING,
        allow_none: bool = False,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
    ) -> None:
        super().__init__(
            type_=date,
            init=init,
            default=default,
            default_factory=default_factory,
            allow_none=allow_none,
            on_invalid=on_invalid,
            error=error,
            setter=setter,
            repr=repr,
            type_check=type_check,
        )

    def _coerce(self, instance: "BaseModel", value):
        if isinstance(value, datetime):
            return value.date()

        if not isinstance(value, str):
            return value

        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass

        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise self.error(
                f"Value of `{self._field_name(instance)}` is not a valid date:"
                f" {value!r}"
            ) from None


EnumType = TypeVar("EnumType", bound=enum.Enum)


def _describe_member(member: enum.Enum) -> str:
    if isinstance(member.value, str):
        return member.value
    return f"{member.value} ({member.name.title()})"


def describe_choices(type_: Type[enum.Enum]) -> str:
    """
    Lists the members of `type_` in a human readable sentence, e.g.
    `HR, Finance, or IT`.
    """
    names = [_describe_member(member) for member in type_]
    if len(names) < 3:
        return " or ".join(names)
    return f"{', '.join(names[:-1])}, or {names[-1]}"


class EnumField(Field[EnumType], Generic[EnumType]):
    """
    Field holding a member of a closed enumeration. Raw values are looked up in the
    enumeration, and values that don't belong to it raise the `error` of the field.
    The message of the error starts with `label` when given, and with the name of the
    field otherwise.
    """

    def __init__(
        self,
        type_: Type[EnumType],
        *,
        init: bool = True,
        default: Union[Optional[EnumType], Type[MISSING]] = MISSING,
        default_factory: Union[
            Optional[Callable[[], EnumType]], Type[MISSING]
        ] = MISSING,
        allow_none: bool = False,
        on_invalid: InvalidPolicy = InvalidPolicy.RAISE,
        error: Type[ValidationError] = ValidationError,
        setter: Optional[SetterType] = None,
        repr: bool = True,
        type_check: bool = True,
        label: Optional[str] = None,
    ) -> None:
        if not isinstance(type_, type) or not issubclass(type_, enum.Enum):
            raise TypeError("EnumField provided type must be a subclass of enum.Enum.")

        super().__init__(
            type_=type_,
            init=init,
            default=default,
            default_factory=default_factory,
            allow_none=allow_none,
            on_invalid=on_invalid,
            error=error,
            setter=setter,
            repr=repr,
            type_check=type_check,
        )
        self.label = label

    def _coerce(self, instance: "BaseModel", value):
        if isinstance(value, self.type_):
            return value

        if not isinstance(value, bool):
            try:
                return self.type_(value)
            except (ValueError, TypeError):
                pass

        subject = self.label or f"Value of `{self._field_name(instance)}`"
        raise self.error(f"{subject} must be one of {describe_choices(self.type_)}.")
