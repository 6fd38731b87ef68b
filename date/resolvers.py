from typing import List, Optional

import calendar
import datetime
import re

from model.errors import InvalidDateError, InvalidDurationError, MissingParameterError

# Resolvers contains utilities to resolve request dates and durations to Python dates.

DURATIONS = ("week", "month")

_YEAR_PATTERN = re.compile(r"[0-9]{4}")
_MONTH_DAY_PATTERN = re.compile(r"[0-9]{1,2}")


def check_duration(duration: Optional[str]) -> str:
    """
    Validates a duration selector.
    :param duration: the raw duration, exactly "week" or "month"
    :return: the duration
    :raises InvalidDurationError: if the duration is missing or unknown
    """
    if duration not in DURATIONS:
        raise InvalidDurationError()
    return duration


def parse_date(year: str, month: str, day: Optional[str]) -> datetime.date:
    """
    Parses a calendar date from request path segments.
    :param year: four digit year, for example: "2024"
    :param month: month in the year, "1" to "12" (zero padding optional)
    :param day: day in the month
    :raises MissingParameterError: if the day was not provided
    :raises InvalidDateError: if the segments do not form a valid date
    """
    if day is None:
        raise MissingParameterError("A day must be provided.")
    if not (_YEAR_PATTERN.fullmatch(year) and _MONTH_DAY_PATTERN.fullmatch(month)
            and _MONTH_DAY_PATTERN.fullmatch(day)):
        raise InvalidDateError()
    try:
        return datetime.date(int(year), int(month), int(day))
    except ValueError:
        raise InvalidDateError()


def parse_month(year: str, month: str) -> datetime.date:
    """
    Parses a year and month from request path segments.
    :return: the first day of the month
    :raises InvalidDateError: if the segments do not form a valid month
    """
    return parse_date(year, month, "1")


def last_day_of_month(day: datetime.date) -> datetime.date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def days_in_range(start: datetime.date, duration: str) -> List[datetime.date]:
    """
    Expands a start date and duration into calendar days.
    A week is the start date plus the following 6 days. A month runs from the
    start date to the last day of the start date's month, so a mid-month start
    yields only the tail of that month.
    :param start: the first day of the range
    :param duration: "week" or "month"
    :return: all days in the range, from lowest to highest
    :raises InvalidDurationError: if the duration is unknown
    :raises InvalidDateError: if the range runs past the last supported date
    """
    check_duration(duration)
    if duration == "week":
        try:
            end = start + datetime.timedelta(days=6)
        except OverflowError:
            raise InvalidDateError()
    else:
        end = last_day_of_month(start)
    day_delta = datetime.timedelta(days=1)
    return [start + day_delta * i for i in range((end - start).days + 1)]


def days_in_month(year: int, month: int) -> List[datetime.date]:
    """
    Gets all days in the specified month.
    :param year: the year, for example: 2022
    :param month: the month in the year, ranging from 1 to 12
    :return: all of the days in the month, from lowest to highest
    """
    if month < 1 or month > 12:
        raise InvalidDateError("Month must be from 1 to 12, inclusive.")
    return days_in_range(datetime.date(year, month, 1), "month")
