from __future__ import annotations

from reprlib import Repr
from typing import Any, Callable, Dict, List, Optional, Tuple, Type
from uuid import UUID, uuid4

from staffio.clock import Clock, SystemClock
from staffio.event import EventListener
from staffio.fields.base import Field, T_co
from staffio.shared import FIELD_RESET_EVENT, MODEL_UPDATE_EVENT
from staffio.state import FieldState, FieldStateMachine, Transition


class ModelMeta:
    __slots__ = ("init", "init_ignore_extra", "repr", "fields")

    init: bool
    init_ignore_extra: bool
    repr: bool
    fields: Dict[str, Field]

    def __init__(self):
        self.init = True
        self.init_ignore_extra = False
        self.repr = True
        self.fields = dict()


# Read-only meta attributes, can't be modified by model class
__MODEL_META_READONLY__ = ("fields",)


class BaseModelMeta(type):
    __slots__ = ()

    """
    BaseModel metaclass. Responsible to internally cache the data schema in a BaseModel
    subclass by identifying its fields.
    """

    def __new__(cls, name: str, bases: Tuple[Type, ...], dct: Dict[str, Any]):
        # internal fields not initialized in BaseModel
        dct["_internal_id"] = None
        dct["_hash"] = None
        dct["_listener"] = None

        # prepares metadata for the model type
        meta = ModelMeta()
        dct["_meta"] = meta

        def _update_meta(_meta: Optional[ModelMeta], extend: bool):
            if not _meta:
                return

            propagate_meta = set(meta.__slots__) - set(__MODEL_META_READONLY__)

            for meta_attribute in propagate_meta:
                if not hasattr(_meta, meta_attribute):
                    continue

                setattr(meta, meta_attribute, getattr(_meta, meta_attribute))

            # excluded meta, needs to be propagated manually
            if extend:
                meta.fields.update(_meta.fields)

        base: Type[BaseModel]
        for base in bases:
            if not hasattr(base, "_meta"):
                continue

            _update_meta(base._meta, True)

        _update_meta(dct.get("Meta", None), False)

        # process class fields
        for field_name, field_value in dct.items():
            if isinstance(field_value, Field):
                meta.fields[field_name] = field_value

        return super().__new__(cls, name, bases, dct)

    def __call__(self, *args, **kwargs):
        instance: BaseModel = super().__call__(*args, **kwargs)

        # stores the defaults after the constructor, if nothing has been set yet
        # this is implemented here so that this is always called, regardless of the
        # models with custom constructors calling or not super().__init__()
        for field in instance._meta.fields.values():
            field._store_default(instance, force=False)

        instance._internal_id = uuid4()
        instance._hash = hash((instance.__class__, str(instance._internal_id)))
        instance._listener = EventListener()
        instance._initialized = True

        return instance


_repr_obj: Repr = Repr()
_repr_obj.maxother = 200


class BaseModel(metaclass=BaseModelMeta):
    """
    A record made of independently validated fields.

    BaseModel is an abstract class that should be extended by declaring Field
    descriptors as class attributes. Every assignment to a field, including the ones
    made through the constructor, goes through the validation pipeline of that field;
    the field alone decides whether the value is stored, rejected with an error or
    replaced by its default (see `InvalidPolicy`). No cross-field validation happens
    at assignment time.

    Each model tracks the FieldState of its fields, so that callers can tell an unset
    field from one that has been reset after an invalid assignment, and dispatches
    update and reset events through its EventListener once construction is finished.
    Listeners run after the new value has been stored and its state recorded. An
    exception raised by a listener propagates to the code that assigned the field,
    and the stored value is kept.

    Validations and computations that depend on the current time read it from the
    Clock given to the constructor. When none is given, the system clock is used.

    All models automatically generate a random internal UUID when created. This UUID is
    used internally for comparison purposes, and externally as an identity. Although
    this attribute is not explicitly set as private, it should never be modified.
    """

    # these are all initialized by the metaclass
    _meta: ModelMeta

    _initialized: bool = False
    _clock: Optional[Clock] = None

    _internal_id: UUID
    _hash: int
    _listener: EventListener

    def __init__(self, clock: Optional[Clock] = None, **kwargs: T_co):
        """
        Instantiates the model by matching `kwargs` parameters to field names.
        Field assignment is disabled when init=False in the model Meta class.

        :param clock: The source of the current time for the model. Defaults to the
                      system clock.
        :param kwargs: The dictionary of keyword arguments matching the field names of
                       the model class.
        :raises ValueError: When invalid arguments are provided.
        """
        self._clock = clock

        meta = self._meta

        if not meta.init:
            return

        for arg_name, value in kwargs.items():
            field_object = meta.fields.get(arg_name, None)

            if not field_object:
                if not meta.init_ignore_extra:
                    raise ValueError(
                        "Invalid argument provided to constructor of"
                        f" `{self.__class__.__name__}`: {arg_name}"
                    )
                continue

            if not field_object.init:
                if not meta.init_ignore_extra:
                    raise ValueError(f"Attribute `{arg_name}` cannot be initialized.")
                continue

            field_object.__set__(self, value)

    @property
    def clock(self) -> Clock:
        """
        Returns the clock used by the model to read the current time.
        """
        if self._clock is None:
            self._clock = SystemClock()
        return self._clock

    @property
    def listener(self) -> EventListener:
        """
        Returns the EventListener of the model instance. Callbacks subscribed to
        MODEL_UPDATE_EVENT or FIELD_RESET_EVENT are called synchronously after the
        assignment has been applied, so a callback that raises does not roll the
        field back.
        """
        return self._listener

    @property
    def fields(self) -> Dict[str, Any]:
        """
        Returns the values of each field in the model instance that holds a value.
        Fields that have never been set and have no default are left out.

        :return: A dict with keys containing the string names of the fields,
                 and values containing the value of the corresponding field.
        """
        return {
            k: self.__dict__[k]
            for k in self._filter_fields(lambda v: True)
            if k in self.__dict__
        }

    def field_state(self, field_name: str) -> FieldState:
        """
        Returns the FieldState of the field with name `field_name`.

        :param field_name: The name of the field.
        :raises ValueError: When the field name does not exist.
        :return: The state of the field.
        """
        self._check_field_name(field_name)
        return self._field_states.get(field_name, FieldState.UNSET)

    def is_field_set(self, field_name: str) -> bool:
        """
        Indicates if the last value assigned to the field `field_name` has been
        accepted.

        :param field_name: The name of the field.
        :raises ValueError: When the field name does not exist.
        :return: True if the field holds a validated value, False otherwise.
        """
        return self.field_state(field_name) == FieldState.SET

    def _check_field_name(self, field_name: str):
        if field_name not in self._meta.fields:
            raise ValueError(
                f"Field `{field_name}` does not exist in model"
                f" `{self.__class__.__name__}`."
            )

    @property
    def _field_states(self) -> Dict[str, FieldState]:
        # created on first access since fields can be assigned before the metaclass
        # finishes the initialization of the instance
        return self.__dict__.setdefault("_states", {})

    def _filter_fields(self, filt: Callable[[Field], bool]):
        return {k: v for k, v in self._meta.fields.items() if filt(v)}

    def _transition_field(self, field: Field[T_co], transition: Transition):
        states = self._field_states
        current = states.get(field.name, FieldState.UNSET)
        states[field.name] = FieldStateMachine.transition(transition, current)

    def _update(self, field: Field[T_co], value: T_co):
        if self._initialized:
            self._listener.dispatch(MODEL_UPDATE_EVENT, self, field, value)

    def _reset(self, field: Field[T_co], rejected: Any):
        if self._initialized:
            self._listener.dispatch(FIELD_RESET_EVENT, self, field, rejected)

    def __eq__(self, other: BaseModel) -> bool:
        return isinstance(other, self.__class__) and self._hash == other._hash

    def __repr__(self) -> str:
        if not self._meta.repr:
            return super().__repr__()

        def get_field_repr(field: str):
            value = self.__dict__[field]
            return f"{field}={_repr_obj.repr(value)}"

        repr_args: List[str] = [
            get_field_repr(n)
            for n in self._filter_fields(lambda x: x.repr)
            if n in self.__dict__
        ]
        return f"{self.__class__.__name__}({', '.join(repr_args)})"

    def __hash__(self) -> int:
        return self._hash
