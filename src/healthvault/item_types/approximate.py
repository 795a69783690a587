"""
Approximate dates and times.

A person often remembers only part of a date ("March 1998") or describes
it in words ("when I was a child"). These models keep exactly what is
known and order values by what they have in common.
"""

import calendar
from datetime import date, datetime, time
from typing import Optional, Tuple, Union
from xml.etree import ElementTree

from ..exceptions import ArgumentError
from ..utils import sub_element_text
from .base import check_node_name, missing, parse_int, register, require_text
from .codable_value import CodableValue


def _check_range(value: Optional[int], low: int, high: int, field: str) -> Optional[int]:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        raise ArgumentError(f"{field} must be between {low} and {high}, got {value!r}")
    return value


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


class _Ordered:
    """Rich comparisons derived from _compare(other) -> int."""

    def _compare(self, other) -> int:
        raise NotImplementedError

    def __eq__(self, other):
        result = self._compare_or_none(other)
        return NotImplemented if result is None else result == 0

    def __lt__(self, other):
        result = self._compare_or_none(other)
        return NotImplemented if result is None else result < 0

    def __le__(self, other):
        result = self._compare_or_none(other)
        return NotImplemented if result is None else result <= 0

    def __gt__(self, other):
        result = self._compare_or_none(other)
        return NotImplemented if result is None else result > 0

    def __ge__(self, other):
        result = self._compare_or_none(other)
        return NotImplemented if result is None else result >= 0

    __hash__ = None

    def _compare_or_none(self, other) -> Optional[int]:
        try:
            return self._compare(other)
        except TypeError:
            return None


@register("approximate-date")
class ApproximateDate(_Ordered):
    """
    A date where only the year is mandatory.

    Attributes:
        year: 1000 to 9999
        month: 1 to 12, optional
        day: 1 to the length of the month, optional; requires month
    """

    def __init__(self, year: Optional[int] = None, month: Optional[int] = None, day: Optional[int] = None):
        self._year = _check_range(year, 1000, 9999, "year")
        self._month = _check_range(month, 1, 12, "month")
        self._day = None
        self.day = day

    @property
    def year(self) -> Optional[int]:
        return self._year

    @year.setter
    def year(self, value: int):
        if value is None:
            raise ArgumentError("year is mandatory")
        year = _check_range(value, 1000, 9999, "year")
        self._check_day(self._day, year=year)
        self._year = year

    @property
    def month(self) -> Optional[int]:
        return self._month

    @month.setter
    def month(self, value: Optional[int]):
        if value is None and self._day is not None:
            raise ArgumentError("month cannot be cleared while day is set")
        month = _check_range(value, 1, 12, "month")
        self._check_day(self._day, month=month)
        self._month = month

    @property
    def day(self) -> Optional[int]:
        return self._day

    @day.setter
    def day(self, value: Optional[int]):
        self._check_day(value)
        self._day = value

    def _check_day(self, value: Optional[int], year: Optional[int] = None, month: Optional[int] = None) -> None:
        if value is None:
            return
        year = year or self._year
        month = month or self._month
        if month is None:
            raise ArgumentError("day requires month")
        # 2000 is a leap year; without a year any February 29 is accepted.
        days = calendar.monthrange(year or 2000, month)[1]
        _check_range(value, 1, days, "day")

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'ApproximateDate':
        return cls(
            year=parse_int(element, "y", required=True),
            month=parse_int(element, "m"),
            day=parse_int(element, "d"),
        )

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._year is None:
            raise missing("ApproximateDate", "year")

        element = ElementTree.Element(node_name)
        sub_element_text(element, "y", self._year)
        if self._month is not None:
            sub_element_text(element, "m", self._month)
        if self._day is not None:
            sub_element_text(element, "d", self._day)
        return element

    def _key(self) -> Tuple[int, int, int]:
        return (self._year or 0, self._month or 0, self._day or 0)

    def _compare(self, other) -> int:
        if isinstance(other, ApproximateDate):
            return _cmp(self._key(), other._key())
        if isinstance(other, date) and not isinstance(other, datetime):
            return _cmp(self._key(), (other.year, other.month, other.day))
        raise TypeError(f"Cannot compare ApproximateDate with {type(other).__name__}")

    def __str__(self) -> str:
        parts = [f"{self._year:04d}" if self._year else "????"]
        if self._month is not None:
            parts.append(f"{self._month:02d}")
        if self._day is not None:
            parts.append(f"{self._day:02d}")
        return "-".join(parts)

    def __repr__(self) -> str:
        return f"ApproximateDate(year={self._year!r}, month={self._month!r}, day={self._day!r})"


@register("approximate-time")
class ApproximateTime(_Ordered):
    """
    A time of day where hour and minute are mandatory.

    Attributes:
        hour: 0 to 23
        minute: 0 to 59
        second: 0 to 59, optional
        millisecond: 0 to 999, optional; requires second
    """

    def __init__(
        self,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        second: Optional[int] = None,
        millisecond: Optional[int] = None,
    ):
        self._hour = _check_range(hour, 0, 23, "hour")
        self._minute = _check_range(minute, 0, 59, "minute")
        self._second = _check_range(second, 0, 59, "second")
        self._millisecond = None
        self.millisecond = millisecond

    @property
    def hour(self) -> Optional[int]:
        return self._hour

    @hour.setter
    def hour(self, value: int):
        if value is None:
            raise ArgumentError("hour is mandatory")
        self._hour = _check_range(value, 0, 23, "hour")

    @property
    def minute(self) -> Optional[int]:
        return self._minute

    @minute.setter
    def minute(self, value: int):
        if value is None:
            raise ArgumentError("minute is mandatory")
        self._minute = _check_range(value, 0, 59, "minute")

    @property
    def second(self) -> Optional[int]:
        return self._second

    @second.setter
    def second(self, value: Optional[int]):
        if value is None and self._millisecond is not None:
            raise ArgumentError("second cannot be cleared while millisecond is set")
        self._second = _check_range(value, 0, 59, "second")

    @property
    def millisecond(self) -> Optional[int]:
        return self._millisecond

    @millisecond.setter
    def millisecond(self, value: Optional[int]):
        if value is not None and self._second is None:
            raise ArgumentError("millisecond requires second")
        self._millisecond = _check_range(value, 0, 999, "millisecond")

    @property
    def has_value(self) -> bool:
        return self._hour is not None and self._minute is not None

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'ApproximateTime':
        return cls(
            hour=parse_int(element, "h", required=True),
            minute=parse_int(element, "m", required=True),
            second=parse_int(element, "s"),
            millisecond=parse_int(element, "f"),
        )

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._hour is None:
            raise missing("ApproximateTime", "hour")
        if self._minute is None:
            raise missing("ApproximateTime", "minute")

        element = ElementTree.Element(node_name)
        sub_element_text(element, "h", self._hour)
        sub_element_text(element, "m", self._minute)
        if self._second is not None:
            sub_element_text(element, "s", self._second)
        if self._millisecond is not None:
            sub_element_text(element, "f", self._millisecond)
        return element

    def _key(self) -> Tuple[int, int, int, int]:
        return (self._hour or 0, self._minute or 0, self._second or 0, self._millisecond or 0)

    def _compare(self, other) -> int:
        if isinstance(other, ApproximateTime):
            return _cmp(self._key(), other._key())
        if isinstance(other, time):
            return _cmp(self._key(), (other.hour, other.minute, other.second, other.microsecond // 1000))
        raise TypeError(f"Cannot compare ApproximateTime with {type(other).__name__}")

    def __str__(self) -> str:
        if not self.has_value:
            return ""
        text = f"{self._hour:02d}:{self._minute:02d}"
        if self._second is not None:
            text += f":{self._second:02d}"
        if self._millisecond is not None:
            text += f".{self._millisecond:03d}"
        return text

    def __repr__(self) -> str:
        return (
            f"ApproximateTime(hour={self._hour!r}, minute={self._minute!r}, "
            f"second={self._second!r}, millisecond={self._millisecond!r})"
        )


@register("approximate-date-time")
class ApproximateDateTime(_Ordered):
    """
    Either a structured date (with optional time and time zone) or a
    free text description; setting one form clears the other.

    Ordering: descriptive values sort before structured ones and compare
    by text; structured values compare by date, then time, with a missing
    time sorting first.
    """

    def __init__(
        self,
        approximate_date: Optional[ApproximateDate] = None,
        approximate_time: Optional[ApproximateTime] = None,
        time_zone: Optional[CodableValue] = None,
        description: Optional[str] = None,
    ):
        self._approximate_date = None
        self._approximate_time = None
        self._time_zone = None
        self._description = None
        if description is not None:
            if approximate_date is not None:
                raise ArgumentError("Pass either a structured date or a description, not both")
            self.description = description
        else:
            self.approximate_date = approximate_date
            self.approximate_time = approximate_time
            self.time_zone = time_zone

    @classmethod
    def from_datetime(cls, value: datetime) -> 'ApproximateDateTime':
        return cls(
            ApproximateDate(value.year, value.month, value.day),
            ApproximateTime(value.hour, value.minute, value.second, value.microsecond // 1000),
        )

    @property
    def approximate_date(self) -> Optional[ApproximateDate]:
        return self._approximate_date

    @approximate_date.setter
    def approximate_date(self, value: Optional[ApproximateDate]):
        self._approximate_date = value
        if value is not None:
            self._description = None

    @property
    def approximate_time(self) -> Optional[ApproximateTime]:
        return self._approximate_time

    @approximate_time.setter
    def approximate_time(self, value: Optional[ApproximateTime]):
        self._approximate_time = value

    @property
    def time_zone(self) -> Optional[CodableValue]:
        return self._time_zone

    @time_zone.setter
    def time_zone(self, value: Optional[CodableValue]):
        self._time_zone = value

    @property
    def description(self) -> Optional[str]:
        return self._description

    @description.setter
    def description(self, value: Optional[str]):
        if value is not None and value != "" and not value.strip():
            raise ArgumentError("description must not be whitespace")
        self._description = value
        if value:
            self._approximate_date = None
            self._approximate_time = None
            self._time_zone = None

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'ApproximateDateTime':
        structured = element.find("structured")
        if structured is None:
            return cls(description=require_text(element, "descriptive"))

        date_element = structured.find("date")
        if date_element is None:
            raise ArgumentError("<structured> has no <date>")
        time_element = structured.find("time")
        tz_element = structured.find("tz")
        return cls(
            ApproximateDate.parse_xml(date_element),
            ApproximateTime.parse_xml(time_element) if time_element is not None else None,
            CodableValue.parse_xml(tz_element) if tz_element is not None else None,
        )

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._approximate_date is None and not self._description:
            raise missing("ApproximateDateTime", "approximate_date or description")

        element = ElementTree.Element(node_name)
        if self._approximate_date is not None:
            structured = ElementTree.SubElement(element, "structured")
            structured.append(self._approximate_date.write_xml("date"))
            if self._approximate_time is not None:
                structured.append(self._approximate_time.write_xml("time"))
            if self._time_zone is not None:
                structured.append(self._time_zone.write_xml("tz"))
        else:
            sub_element_text(element, "descriptive", self._description)
        return element

    def _compare(self, other: Union['ApproximateDateTime', datetime]) -> int:
        if isinstance(other, datetime):
            if self._approximate_date is None:
                return -1
            result = self._approximate_date._compare(other.date())
            if result != 0:
                return result
            if self._approximate_time is None:
                return -1
            return self._approximate_time._compare(other.time())

        if not isinstance(other, ApproximateDateTime):
            raise TypeError(f"Cannot compare ApproximateDateTime with {type(other).__name__}")

        if self._approximate_date is None:
            if other._approximate_date is not None:
                return -1
            return _cmp(self._description or "", other._description or "")
        if other._approximate_date is None:
            return 1

        result = self._approximate_date._compare(other._approximate_date)
        if result != 0:
            return result
        if self._approximate_time is None:
            return 0 if other._approximate_time is None else -1
        if other._approximate_time is None:
            return 1
        return self._approximate_time._compare(other._approximate_time)

    def __str__(self) -> str:
        if self._description:
            return self._description
        if self._approximate_date is None:
            return ""
        text = str(self._approximate_date)
        if self._approximate_time is not None and self._approximate_time.has_value:
            text += f" {self._approximate_time}"
        if self._time_zone is not None:
            text += f" {self._time_zone}"
        return text

    def __repr__(self) -> str:
        if self._description:
            return f"ApproximateDateTime(description={self._description!r})"
        return (
            f"ApproximateDateTime({self._approximate_date!r}, {self._approximate_time!r}, "
            f"time_zone={self._time_zone!r})"
        )
