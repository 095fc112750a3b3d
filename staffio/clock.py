from datetime import date, datetime, timedelta
from typing import Union


class Clock:
    """
    Source of the current time for models.

    Validations and computations that depend on "now" read it through the clock of the
    model instance, so that they can be made deterministic by injecting a FixedClock.
    """

    def now(self) -> datetime:
        raise NotImplementedError(f"{self.__class__.__name__}.now is not implemented.")

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """
    Reads the local time of the system.
    """

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """
    Always returns the same instant, until moved with `advance`.
    """

    _instant: datetime

    def __init__(self, instant: Union[date, datetime]):
        if not isinstance(instant, datetime):
            if not isinstance(instant, date):
                raise TypeError("FixedClock requires a date or datetime instant.")
            instant = datetime.combine(instant, datetime.min.time())

        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs: float):
        """
        Moves the clock forward by the `datetime.timedelta` built from `kwargs`.
        """
        self._instant += timedelta(**kwargs)

    def __repr__(self) -> str:
        return f"FixedClock({self._instant.isoformat()})"
