from datetime import datetime

import pytest

from staffio.clock import FixedClock


# Models that read the current time get this clock in tests, so that age, date and
# discount checks don't depend on the day the suite runs
@pytest.fixture(scope="function")
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 12, 0))
