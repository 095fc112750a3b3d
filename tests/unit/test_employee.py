from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from staffio.clock import FixedClock
from staffio.employee import (
    Department,
    EducationLevel,
    Employee,
    add_years,
    completed_years,
    is_adult,
)
from staffio.errors import (
    AgeError,
    DomainError,
    PreconditionError,
    RangeError,
    TemporalError,
    UnsetFieldError,
    ValidationError,
)
from staffio.shared import FIELD_RESET_EVENT, MODEL_UPDATE_EVENT
from staffio.state import FieldState


@pytest.fixture
def employee(clock) -> Employee:
    return Employee(clock=clock)


class TestEmployeeNationalId:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1234567890, 1234567890),
            (9999999999, 9999999999),
            (1000000000, 1000000000),
            (99999999999, None),
            (999999999, None),
            (0, None),
            (-123456789, None),
        ],
    )
    def test_national_id(self, employee, value, expected):
        employee.national_id = value

        assert employee.national_id == expected

    def test_national_id_absent_by_default(self, employee):
        assert employee.national_id is None
        assert employee.field_state("national_id") == FieldState.UNSET

    def test_invalid_national_id_resets_previous_value(self, employee):
        employee.national_id = 1234567890
        employee.national_id = 123

        assert employee.national_id is None
        assert employee.field_state("national_id") == FieldState.RESET

    def test_national_id_cleared_with_none(self, employee):
        employee.national_id = 1234567890
        employee.national_id = None

        assert employee.national_id is None

    def test_national_id_wrong_type(self, employee):
        with pytest.raises(TypeError):
            employee.national_id = "1234567890"


class TestEmployeeNames:
    name_provider = [
        ("John", "John"),
        ("a", "a"),
        ("ABCDEFGHIJKLMNOPQRSTUVWXYZABCD", "ABCDEFGHIJKLMNOPQRSTUVWXYZABCD"),
        ("ABCDEFGHIJKLMNOPQRSTUVWXYZABC", "ABCDEFGHIJKLMNOPQRSTUVWXYZABC"),
        ("a a a a a a a", "a a a a a a a"),
        ("a-a-a-a-a-a-a", "a-a-a-a-a-a-a"),
        (" ", " "),
        ("", ""),
        ("ABCDEFGHIJKLMNOPQRSTUVWXYZABCDE", ""),
        ("Søren", "Søren"),
        ("Åse-Marie", "Åse-Marie"),
        ("ÆBLE ØRN", "ÆBLE ØRN"),
        ("José Núñez", "José Núñez"),
        ("François", "François"),
        ("Zoë Müller", "Zoë Müller"),
        ("Jérôme", "Jérôme"),
        ("John3", ""),
        ("O'Brien", ""),
        ("Anna_Lee", ""),
        ("John\n", ""),
        ("Ωmega", ""),
        ("Łukasz", ""),
    ]

    @pytest.mark.parametrize("value, expected", name_provider)
    def test_first_name(self, employee, value, expected):
        employee.first_name = value

        assert employee.first_name == expected

    @pytest.mark.parametrize("value, expected", name_provider)
    def test_last_name(self, employee, value, expected):
        employee.last_name = value

        assert employee.last_name == expected

    def test_names_empty_by_default(self, employee):
        assert employee.first_name == ""
        assert employee.last_name == ""

    def test_invalid_name_resets_previous_value(self, employee):
        employee.first_name = "Ann"
        employee.last_name = "Berg"

        employee.first_name = "4nn"

        assert employee.first_name == ""
        assert employee.last_name == "Berg"
        assert employee.field_state("first_name") == FieldState.RESET
        assert employee.field_state("last_name") == FieldState.SET

    def test_name_reset_is_reported(self, employee):
        resets = []

        def on_reset(obj, field, rejected):
            resets.append((field.name, rejected))

        employee.listener.subscribe(FIELD_RESET_EVENT, on_reset)
        employee.last_name = "X" * 31

        assert resets == [("last_name", "X" * 31)]


class TestEmployeeDepartment:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (Department.HR, Department.HR),
            ("HR", Department.HR),
            ("Finance", Department.FINANCE),
            ("IT", Department.IT),
            ("Sales", Department.SALES),
            ("General Services", Department.GENERAL_SERVICES),
        ],
    )
    def test_department(self, employee, value, expected):
        employee.department = value

        assert employee.department is expected

    @pytest.mark.parametrize("value", ["Marketing", "hr", "GeneralServices", "", 1])
    def test_invalid_department(self, employee, value):
        with pytest.raises(
            DomainError,
            match="^Department must be one of HR, Finance, IT, Sales, or General"
            " Services\\.$",
        ) as error:
            employee.department = value

        assert error.value.field == "Employee.department"

    def test_invalid_department_message(self, employee):
        with pytest.raises(DomainError) as error:
            employee.department = "Marketing"

        assert str(error.value) == (
            "Department must be one of HR, Finance, IT, Sales, or General Services."
        )

    def test_invalid_department_keeps_previous_value(self, employee):
        employee.department = Department.SALES

        with pytest.raises(DomainError):
            employee.department = "Marketing"

        assert employee.department is Department.SALES

    def test_department_unset(self, employee):
        with pytest.raises(UnsetFieldError):
            employee.department


class TestEmployeeBaseSalary:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (20000, Decimal("20000.00")),
            (100000, Decimal("100000.00")),
            (20000.005, Decimal("20000.00")),
            (55555.559, Decimal("55555.55")),
            (99999.999, Decimal("99999.99")),
            ("30000.999", Decimal("30000.99")),
            (Decimal("45000.1"), Decimal("45000.10")),
        ],
    )
    def test_base_salary(self, employee, value, expected):
        employee.base_salary = value

        assert employee.base_salary == expected
        assert employee.base_salary.as_tuple().exponent == -2

    @pytest.mark.parametrize(
        "value", [19999.99, 100000.01, 100000.001, 0, -20000, "abc", float("nan")]
    )
    def test_invalid_base_salary(self, employee, value):
        with pytest.raises(RangeError):
            employee.base_salary = value

        assert not employee.is_field_set("base_salary")
        with pytest.raises(UnsetFieldError):
            employee.base_salary

    def test_invalid_base_salary_message(self, employee):
        with pytest.raises(RangeError, match="between 20000 and 100000 DKK"):
            employee.base_salary = 10

    def test_invalid_base_salary_keeps_previous_value(self, employee):
        employee.base_salary = 25000

        with pytest.raises(RangeError):
            employee.base_salary = 150000

        assert employee.base_salary == Decimal("25000.00")


class TestEmployeeEducationLevel:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, EducationLevel.NONE),
            (1, EducationLevel.PRIMARY),
            (2, EducationLevel.SECONDARY),
            (3, EducationLevel.TERTIARY),
            (EducationLevel.TERTIARY, EducationLevel.TERTIARY),
        ],
    )
    def test_education_level(self, employee, value, expected):
        employee.education_level = value

        assert employee.education_level is expected

    @pytest.mark.parametrize("value", [-1, 4, 10, True, "2", 1.5])
    def test_invalid_education_level(self, employee, value):
        employee.education_level = EducationLevel.PRIMARY

        with pytest.raises(DomainError, match="0 \\(None\\), 1 \\(Primary\\)"):
            employee.education_level = value

        assert employee.education_level is EducationLevel.PRIMARY

    def test_invalid_education_level_message(self, employee):
        with pytest.raises(DomainError) as error:
            employee.education_level = 4

        assert str(error.value) == (
            "Education level must be one of 0 (None), 1 (Primary), 2 (Secondary),"
            " or 3 (Tertiary)."
        )


class TestEmployeeDateOfBirth:
    @pytest.mark.parametrize(
        "value",
        ["2008-10-19", "2008-10-18", "2008-01-01", "1960-05-17", date(2000, 2, 29)],
    )
    def test_adult(self, employee, value):
        employee.date_of_birth = value

        assert employee.is_field_set("date_of_birth")

    @pytest.mark.parametrize(
        "value", ["2008-10-20", "2008-12-31", "2009-01-01", "2026-10-19", "2030-01-01"]
    )
    def test_minor(self, employee, value):
        with pytest.raises(AgeError, match="at least 18 years old"):
            employee.date_of_birth = value

        assert not employee.is_field_set("date_of_birth")

    def test_stores_birth_date(self, employee):
        employee.date_of_birth = "2008-10-19"

        assert employee.date_of_birth == date(2008, 10, 19)

    @pytest.mark.parametrize(
        "today, accepted",
        [
            (datetime(2026, 2, 28, 23, 59), False),
            (datetime(2026, 3, 1, 0, 0), True),
        ],
    )
    def test_leap_day_birthday(self, today, accepted):
        employee = Employee(clock=FixedClock(today))

        if accepted:
            employee.date_of_birth = "2008-02-29"
            assert employee.date_of_birth == date(2008, 2, 29)
        else:
            with pytest.raises(AgeError):
                employee.date_of_birth = "2008-02-29"

    @pytest.mark.parametrize("value", ["", "not a date", "19-10-2000"])
    def test_unparseable(self, employee, value):
        with pytest.raises(AgeError):
            employee.date_of_birth = value

    def test_invalid_keeps_previous_value(self, employee):
        employee.date_of_birth = "1990-01-01"

        with pytest.raises(AgeError):
            employee.date_of_birth = "2020-01-01"

        assert employee.date_of_birth == date(1990, 1, 1)

    def test_checked_against_clock(self, clock):
        employee = Employee(clock=clock)

        with pytest.raises(AgeError):
            employee.date_of_birth = "2008-10-20"

        clock.advance(days=1)
        employee.date_of_birth = "2008-10-20"

        assert employee.date_of_birth == date(2008, 10, 20)


class TestEmployeeDateOfEmployment:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-10-19", date(2026, 10, 19)),
            ("2020-01-01", date(2020, 1, 1)),
            (datetime(2026, 10, 19, 23, 59), date(2026, 10, 19)),
        ],
    )
    def test_date_of_employment(self, employee, value, expected):
        employee.date_of_employment = value

        assert employee.date_of_employment == expected

    @pytest.mark.parametrize("value", ["2026-10-20", "2100-01-01", "soon"])
    def test_invalid_date_of_employment(self, employee, value):
        with pytest.raises(TemporalError):
            employee.date_of_employment = value

        assert not employee.is_field_set("date_of_employment")

    def test_future_message(self, employee):
        with pytest.raises(TemporalError, match="cannot be in the future"):
            employee.date_of_employment = "2026-10-20"


class TestEmployeeCountry:
    @pytest.mark.parametrize("value", ["Denmark", "germany", " "])
    def test_country(self, employee, value):
        employee.country = value

        assert employee.country == value

    def test_empty_country(self, employee):
        employee.country = "Norway"

        with pytest.raises(ValidationError, match="cannot be empty"):
            employee.country = ""

        assert employee.country == "Norway"


class TestEmployeeSalary:
    @pytest.mark.parametrize(
        "base_salary, education_level, expected",
        [
            (20000, 2, Decimal("22440")),
            (20000, 0, Decimal("20000")),
            (50000.5, 3, Decimal("53660.50")),
            (100000, 1, Decimal("101220")),
        ],
    )
    def test_salary(self, employee, base_salary, education_level, expected):
        employee.base_salary = base_salary
        employee.education_level = education_level

        assert employee.salary == expected

    def test_salary_without_base_salary(self, employee):
        employee.education_level = 1

        with pytest.raises(PreconditionError, match="base_salary"):
            employee.salary

    def test_salary_without_education_level(self, employee):
        employee.base_salary = 30000

        with pytest.raises(PreconditionError, match="education_level"):
            employee.salary


class TestEmployeeShippingCosts:
    @pytest.mark.parametrize(
        "country, expected",
        [
            ("Denmark", 0),
            ("Sweden", 0),
            ("Norway", 0),
            ("Iceland", 50),
            ("Finland", 50),
            ("Germany", 100),
            ("denmark", 100),
            ("Denmark ", 100),
        ],
    )
    def test_shipping_costs(self, employee, country, expected):
        employee.country = country

        assert employee.shipping_costs == Decimal(expected)

    def test_shipping_costs_without_country(self, employee):
        with pytest.raises(PreconditionError, match="country"):
            employee.shipping_costs


class TestEmployeeDiscount:
    def test_discount_3_9_years(self, clock, employee):
        employed = clock.now() - timedelta(days=3.9 * 365.25)
        employee.date_of_employment = employed.date()

        assert employee.discount == Decimal("1.5")

    @pytest.mark.parametrize(
        "employed, expected",
        [
            ("2026-10-19", Decimal("0")),
            ("2025-10-20", Decimal("0")),
            ("2025-10-19", Decimal("0.5")),
            ("2016-06-01", Decimal("5")),
        ],
    )
    def test_discount(self, employee, employed, expected):
        employee.date_of_employment = employed

        assert employee.discount == expected

    def test_discount_follows_clock(self, clock):
        employee = Employee(clock=clock, date_of_employment="2025-10-20")

        assert employee.discount == 0

        clock.advance(days=1)

        assert employee.discount == Decimal("0.5")

    def test_discount_without_date_of_employment(self, employee):
        with pytest.raises(PreconditionError, match="date_of_employment"):
            employee.discount


class TestEmployee:
    def test_constructor(self, clock):
        employee = Employee(
            clock=clock,
            national_id=1234567890,
            first_name="Søren",
            last_name="Kierkegaard",
            department="IT",
            base_salary=42000.999,
            education_level=3,
            date_of_birth="1990-05-05",
            date_of_employment="2020-01-01",
            country="Denmark",
        )

        assert employee.fields == {
            "national_id": 1234567890,
            "first_name": "Søren",
            "last_name": "Kierkegaard",
            "department": Department.IT,
            "base_salary": Decimal("42000.99"),
            "education_level": EducationLevel.TERTIARY,
            "date_of_birth": date(1990, 5, 5),
            "date_of_employment": date(2020, 1, 1),
            "country": "Denmark",
        }
        assert employee.salary == Decimal("45660.99")
        assert employee.shipping_costs == 0
        assert employee.discount == Decimal("3")

    def test_constructor_raises_for_invalid_values(self, clock):
        with pytest.raises(DomainError):
            Employee(clock=clock, department="Marketing")

    def test_constructor_rejects_unknown_arguments(self, clock):
        with pytest.raises(ValueError, match="Invalid argument.*: contry"):
            Employee(clock=clock, contry="Denmark")

    def test_constructor_resets_invalid_names(self, clock):
        employee = Employee(clock=clock, first_name="R2D2")

        assert employee.first_name == ""
        assert employee.field_state("first_name") == FieldState.RESET

    def test_empty_employee(self, employee):
        assert employee.fields == {
            "national_id": None,
            "first_name": "",
            "last_name": "",
        }
        assert repr(employee) == (
            "Employee(national_id=None, first_name='', last_name='')"
        )

    def test_fields_are_independent(self, employee):
        employee.country = "Iceland"
        employee.base_salary = 30000

        with pytest.raises(RangeError):
            employee.base_salary = 1

        employee.first_name = "!"

        assert employee.country == "Iceland"
        assert employee.base_salary == Decimal("30000.00")

    def test_listener_error_keeps_assigned_value(self, employee):
        def on_update(obj, field, value):
            raise RuntimeError(f"cannot publish {field.name}")

        employee.department = Department.HR
        employee.listener.subscribe(MODEL_UPDATE_EVENT, on_update)

        with pytest.raises(RuntimeError, match="cannot publish department"):
            employee.department = "IT"

        assert employee.department is Department.IT
        assert employee.field_state("department") == FieldState.SET


class TestHelpers:
    @pytest.mark.parametrize(
        "day, years, expected",
        [
            (date(2008, 10, 19), 18, date(2026, 10, 19)),
            (date(2008, 2, 29), 18, date(2026, 3, 1)),
            (date(2008, 2, 29), 16, date(2024, 2, 29)),
        ],
    )
    def test_add_years(self, day, years, expected):
        assert add_years(day, years) == expected

    def test_add_years_does_not_mutate(self):
        day = date(2008, 10, 19)
        add_years(day, 18)

        assert day == date(2008, 10, 19)

    @pytest.mark.parametrize(
        "birth, today, expected",
        [
            (date(2008, 10, 19), date(2026, 10, 19), True),
            (date(2008, 10, 20), date(2026, 10, 19), False),
            (date(2007, 12, 31), date(2026, 1, 1), True),
            (date(2008, 12, 31), date(2026, 12, 30), False),
        ],
    )
    def test_is_adult(self, birth, today, expected):
        assert is_adult(birth, today) is expected

    def test_completed_years(self):
        assert completed_years(date(2020, 1, 1), datetime(2022, 12, 31)) == 2
        assert completed_years(date(2020, 1, 1), datetime(2023, 1, 2)) == 3
