from staffio.fields.base import Field, InvalidPolicy
from staffio.fields.typed import DateField, DecimalField, EnumField, IntField, StrField

__all__ = (
    "Field",
    "InvalidPolicy",
    "IntField",
    "StrField",
    "DecimalField",
    "DateField",
    "EnumField",
)
