import logging
from datetime import date

from staffio import Department, Employee, FixedClock, ValidationError
from staffio.shared import FIELD_RESET_EVENT


def report_reset(employee: Employee, field, rejected):
    value = employee.fields[field.name]
    print(f"{field.name} rejected {rejected!r} and was reset to {value!r}")


def main():
    logging.basicConfig(level=logging.DEBUG)

    employee = Employee(clock=FixedClock(date(2026, 10, 19)))
    employee.listener.subscribe(FIELD_RESET_EVENT, report_reset)

    employee.national_id = 1234567890
    employee.first_name = "Søren"
    employee.last_name = "Kierkegaard 2"  # reset to ""
    employee.department = Department.IT
    employee.base_salary = 20000.005
    employee.education_level = 2
    employee.date_of_employment = "2022-10-25"
    employee.country = "Iceland"

    try:
        employee.date_of_birth = "2010-01-01"
    except ValidationError as error:
        print(f"{error.field}: {error}")

    print(employee)
    print("salary:", employee.salary)
    print("shipping costs:", employee.shipping_costs)
    print("discount:", employee.discount)


if __name__ == "__main__":
    main()
