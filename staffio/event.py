import types
import weakref
from typing import Any, Callable, Dict, List, Optional, Union

ListeningMethod = Union[weakref.WeakMethod, types.FunctionType]


class EventListener:
    """
    Event listener attached to every model instance.

    Fields notify the listener when a value is accepted (`MODEL_UPDATE_EVENT`) or when
    an invalid value silently resets a field to its default (`FIELD_RESET_EVENT`). The
    model itself never reports these outcomes to the user; the calling layer subscribes
    to them when it needs to.

    Callbacks are triggered synchronously, in the order they were subscribed.
    Subscribing the same callback twice to the same event has no effect. Bound methods
    are held through WeakMethod so that the listener does not keep their instances
    alive; callbacks whose instance has been garbage collected are skipped.
    """

    _listener: Dict[str, List[ListeningMethod]]

    def __init__(self):
        self._listener = {}

    def subscribe(self, event: str, method: Callable[..., Any]):
        """
        Subscribes the callback `method` to the event `event`.

        :param event: The event name.
        :param method: The callback function or bound method.
        :raises ValueError: If no event name is provided.
        :raises TypeError: If `method` is neither a function nor a bound method.
        """
        if not event:
            raise ValueError("You must specify a valid event name.")

        reference = self._reference_method(method)
        callbacks = self._listener.setdefault(event, [])
        if reference not in callbacks:
            callbacks.append(reference)

    def unsubscribe(self, event: str, method: Callable[..., Any]):
        """
        Unsubscribes the callback `method` from the event `event`. Unknown events or
        callbacks are ignored.
        """
        reference = self._reference_method(method)
        callbacks = self._listener.get(event, [])
        if reference in callbacks:
            callbacks.remove(reference)

    def _reference_method(self, method: Callable[..., Any]) -> ListeningMethod:
        if isinstance(method, types.MethodType):
            return weakref.WeakMethod(method)  # type: ignore
        elif isinstance(method, types.FunctionType):
            return method  # type: ignore
        else:
            raise TypeError(
                "The parameter `method` must be either a method or a function"
            )

    def dispatch(self, event: str, *args, **kwargs):
        """
        Calls every callback subscribed to `event` with `args` and `kwargs`. Exceptions
        raised by a callback interrupt the dispatch and propagate to the caller, which
        is the code that assigned the field.
        """
        for reference in list(self._listener.get(event, [])):
            method = self._resolve_reference(reference)
            if not method:
                continue

            method(*args, **kwargs)

    def _resolve_reference(
        self, reference: ListeningMethod
    ) -> Optional[Callable[..., Any]]:
        if isinstance(reference, weakref.WeakMethod):
            return reference()
        return reference
