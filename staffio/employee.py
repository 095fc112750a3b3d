import math
import re
from datetime import date, datetime
from decimal import ROUND_FLOOR, Decimal
from enum import Enum, IntEnum
from typing import Optional

from staffio.errors import (
    AgeError,
    DomainError,
    RangeError,
    TemporalError,
    ValidationError,
)
from staffio.fields import (
    DateField,
    DecimalField,
    EnumField,
    IntField,
    InvalidPolicy,
    StrField,
)
from staffio.model import BaseModel

MIN_BASE_SALARY = Decimal("20000")
MAX_BASE_SALARY = Decimal("100000")
SALARY_PRECISION = Decimal("0.01")
EDUCATION_SUPPLEMENT = Decimal("1220")

MINIMUM_AGE = 18

NATIONAL_ID_PATTERN = re.compile(r"\d{10}")
NAME_PATTERN = re.compile(
    r"[a-zA-ZæøåñçáéíóúàèìòùäëïöüâêîôûÆØÅÑÇÁÉÍÓÚÀÈÌÒÙÄËÏÖÜÂÊÎÔÛ \-]{1,30}"
)

COUNTRIES_NO_SHIPPING_COSTS = frozenset({"Denmark", "Sweden", "Norway"})
COUNTRIES_HALF_SHIPPING_COSTS = frozenset({"Iceland", "Finland"})
NO_SHIPPING_COSTS = Decimal("0")
HALF_SHIPPING_COSTS = Decimal("50")
FULL_SHIPPING_COSTS = Decimal("100")

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60
DISCOUNT_PER_YEAR = Decimal("0.5")


class Department(Enum):
    HR = "HR"
    FINANCE = "Finance"
    IT = "IT"
    SALES = "Sales"
    GENERAL_SERVICES = "General Services"


class EducationLevel(IntEnum):
    NONE = 0
    PRIMARY = 1
    SECONDARY = 2
    TERTIARY = 3


def add_years(day: date, years: int) -> date:
    """
    Returns the date `years` years after `day`. February 29 falls on March 1 when the
    target year is not a leap year.
    """
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return date(day.year + years, 3, 1)


def is_adult(birth: date, today: date) -> bool:
    """
    Indicates if someone born on `birth` is at least MINIMUM_AGE years old on `today`.
    """
    age = today.year - birth.year
    return age > MINIMUM_AGE or (
        age == MINIMUM_AGE and today >= add_years(birth, MINIMUM_AGE)
    )


def is_valid_name(name: str) -> bool:
    return NAME_PATTERN.fullmatch(name) is not None


def completed_years(start: date, now: datetime) -> int:
    """
    Number of whole 365.25-day years elapsed between midnight of `start` and `now`.
    """
    elapsed = now - datetime.combine(start, datetime.min.time())
    return math.floor(elapsed.total_seconds() / SECONDS_PER_YEAR)


class Employee(BaseModel):
    """
    Employee record.

    Each field validates its own values and declares what happens to invalid ones:

    ==================  =========================================  ================
    Field               Accepts                                    When invalid
    ==================  =========================================  ================
    national_id         integers of exactly 10 digits              reset to None
    first_name          1 to 30 letters, spaces or hyphens         reset to ""
    last_name           1 to 30 letters, spaces or hyphens         reset to ""
    department          a Department or its name                   DomainError
    base_salary         20000 to 100000, truncated to 2 decimals   RangeError
    education_level     an EducationLevel or 0 to 3                DomainError
    date_of_birth       employee at least 18 years old             AgeError
    date_of_employment  today or earlier                           TemporalError
    country             any non-empty string                       ValidationError
    ==================  =========================================  ================

    Fields that raise leave the previous value in place. Fields that were never set
    raise UnsetFieldError when read, and so do the derived values `salary`,
    `shipping_costs` and `discount` when they depend on one of them.
    """

    national_id: IntField = IntField(
        allow_none=True, on_invalid=InvalidPolicy.RESET
    )
    first_name: StrField = StrField(default="", on_invalid=InvalidPolicy.RESET)
    last_name: StrField = StrField(default="", on_invalid=InvalidPolicy.RESET)
    department: EnumField[Department] = EnumField(
        Department, error=DomainError, label="Department"
    )
    base_salary: DecimalField = DecimalField(error=RangeError)
    education_level: EnumField[EducationLevel] = EnumField(
        EducationLevel, error=DomainError, label="Education level"
    )
    date_of_birth: DateField = DateField(error=AgeError)
    date_of_employment: DateField = DateField(error=TemporalError)
    country: StrField = StrField()

    @national_id.setter
    def _validate_national_id(self, value: Optional[int]) -> Optional[int]:
        if value is None or not NATIONAL_ID_PATTERN.fullmatch(str(value)):
            raise ValidationError("National ID must have exactly 10 digits.")
        return value

    @first_name.setter
    def _validate_first_name(self, value: str) -> str:
        if not is_valid_name(value):
            raise ValidationError(f"Invalid first name: {value!r}")
        return value

    @last_name.setter
    def _validate_last_name(self, value: str) -> str:
        if not is_valid_name(value):
            raise ValidationError(f"Invalid last name: {value!r}")
        return value

    @base_salary.setter
    def _validate_base_salary(self, value: Decimal) -> Decimal:
        if not MIN_BASE_SALARY <= value <= MAX_BASE_SALARY:
            raise RangeError("Base salary must be between 20000 and 100000 DKK.")
        return value.quantize(SALARY_PRECISION, rounding=ROUND_FLOOR)

    @date_of_birth.setter
    def _validate_date_of_birth(self, value: date) -> date:
        if not is_adult(value, self.clock.today()):
            raise AgeError("Employee must be at least 18 years old.")
        return value

    @date_of_employment.setter
    def _validate_date_of_employment(self, value: date) -> date:
        if value > self.clock.today():
            raise TemporalError("Date of employment cannot be in the future.")
        return value

    @country.setter
    def _validate_country(self, value: str) -> str:
        if not value:
            raise ValidationError("Country name cannot be empty.")
        return value

    @property
    def salary(self) -> Decimal:
        """
        Base salary plus a supplement of 1220 per education level.
        """
        return self.base_salary + self.education_level * EDUCATION_SUPPLEMENT

    @property
    def shipping_costs(self) -> Decimal:
        country = self.country
        if country in COUNTRIES_NO_SHIPPING_COSTS:
            return NO_SHIPPING_COSTS
        if country in COUNTRIES_HALF_SHIPPING_COSTS:
            return HALF_SHIPPING_COSTS
        return FULL_SHIPPING_COSTS

    @property
    def discount(self) -> Decimal:
        """
        Discount rate of 0.5 per completed year of employment. This is a rate, not an
        amount of money.
        """
        years = completed_years(self.date_of_employment, self.clock.now())
        return DISCOUNT_PER_YEAR * years
