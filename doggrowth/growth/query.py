import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable

from doggrowth.core.errors import InvalidQuery

BREED_PLACEHOLDER = "Select breed"
SEX_PLACEHOLDER = "Select sex"


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class AgeInputMode(str, Enum):
    SLIDER = "slider"
    BIRTHDATE = "birthdate"


@dataclass(frozen=True)
class Query:
    """Validated details of one dog, passed unchanged through the pipeline."""

    breed: str
    sex: Sex
    current_age: float  # weeks
    current_weight: float  # lbs


def weeks_since(birthdate: date, today: date) -> float:
    return (today - birthdate).days / 7.0


def _parse_sex(value) -> Sex | None:
    if isinstance(value, Sex):
        return value
    if not value or value == SEX_PLACEHOLDER:
        return None
    for sex in Sex:
        if str(value).strip().lower() == sex.value.lower():
            return sex
    return None


def validate_query(
    breed: str | None,
    sex: str | Sex | None,
    current_weight: float | None,
    age_input_mode: str | AgeInputMode = AgeInputMode.SLIDER,
    current_age: float | None = None,
    birthdate: date | None = None,
    known_breeds: Iterable[str] = (),
    allow_new_breeds: bool = True,
    max_age: int | None = None,
    today: date | None = None,
) -> Query:
    """
    Turn raw form input into a Query, or raise InvalidQuery listing every problem.

    ``max_age`` is the last age on a fixed-width prediction grid; when given,
    ages past it are rejected because they would fall off the grid.
    """
    problems = []

    breed = (breed or "").strip()
    if not breed or breed == BREED_PLACEHOLDER:
        problems.append("breed is required")
    elif not allow_new_breeds and breed not in set(known_breeds):
        problems.append(f"unknown breed: {breed}")

    parsed_sex = _parse_sex(sex)
    if parsed_sex is None:
        problems.append("sex must be one of: " + ", ".join(s.value for s in Sex))

    try:
        mode = AgeInputMode(age_input_mode)
    except ValueError:
        mode = None
        problems.append(f"unknown age input mode: {age_input_mode}")

    age = None
    if mode is AgeInputMode.BIRTHDATE:
        if birthdate is None:
            problems.append("birthdate is required when age is given by birth date")
        else:
            today = today or date.today()
            if birthdate > today:
                problems.append("birthdate cannot be in the future")
            else:
                age = weeks_since(birthdate, today)
    elif mode is AgeInputMode.SLIDER:
        if current_age is None:
            problems.append("current age is required")
        else:
            age = float(current_age)

    if age is not None:
        if not math.isfinite(age) or age < 1:
            problems.append("current age must be at least 1 week")
        elif max_age is not None and age > max_age:
            problems.append(f"current age must not exceed {max_age} weeks")

    if current_weight is None:
        problems.append("current weight is required")
    elif not math.isfinite(current_weight) or current_weight <= 0:
        problems.append("current weight must be positive")

    if problems:
        raise InvalidQuery(problems)

    return Query(
        breed=breed,
        sex=parsed_sex,
        current_age=age,
        current_weight=float(current_weight),
    )
