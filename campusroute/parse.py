"""
Parsing (decoded spreadsheet rows -> course offerings).

- Locates the header row (first row with a cell containing "CRN")
- Resolves column roles by case-insensitive substring match on the header
- Turns EACH data row into exactly ONE CourseOffering
- Shares Course / Instructor objects between rows of the same parse

Important rules (DO NOT CHANGE):
- Reference numbers always go through normalize_reference(), for sheet cells
  AND for user input, otherwise "12345.0" and 12345 stop matching
- Soft problems (bad time, unknown day letter, missing column) never raise,
  the row just yields fewer sessions
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import time
from typing import Any, Optional

from campusroute.buildings import BuildingDirectory
from campusroute.errors import StructuralParseError
from campusroute.model import (
    ActivityKind,
    Course,
    CourseOffering,
    DayOfWeek,
    DeliveryMode,
    Instructor,
    MeetingSession,
    Room,
    TimeSlot,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _cell_text(value: Any) -> str:
    """
    Text of one cell.

    Integral numbers lose their float artifacts (building 11.0 -> "11"),
    time cells become "HH:MM".
    """
    if value is None:
        return ""
    if _is_number(value):
        number = float(value)
        if not math.isfinite(number):
            return ""
        if number.is_integer():
            return str(int(number))
        return str(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value).strip()


# ---------------------------------------------------------------------------
# Reference numbers
# ---------------------------------------------------------------------------

_TRAILING_ZEROS = re.compile(r"\.0+$")
_DECIMAL_TEXT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+(\.\d*)?[eE][+-]?\d+)$")


def normalize_reference(value: Any) -> Optional[str]:
    """
    Canonical text form of a CRN, or None for an empty cell.

    - numbers are truncated to an integer ("61234.0" float -> "61234")
    - text is trimmed and loses trailing ".0" remnants ("61234.00" -> "61234")
    - decimal / scientific text is read as a number ("6.1234E4" -> "61234")

    Plain digit strings are kept as-is, including leading zeros.
    """
    if value is None or isinstance(value, bool):
        return None

    if _is_number(value):
        number = float(value)
        if not math.isfinite(number):
            return None
        return str(int(number))

    text = _TRAILING_ZEROS.sub("", str(value).strip())
    if not text:
        return None

    if _DECIMAL_TEXT.match(text):
        number = float(text)
        if math.isfinite(number):
            return str(int(number))
    return text


def parse_reference_list(references: str | Iterable[Any]) -> list[str]:
    """
    Normalize user input like "61234, 61235.0" into ["61234", "61235"].

    Blank items and repeats are dropped; input order is kept.
    """
    items = references.split(",") if isinstance(references, str) else list(references)

    out: list[str] = []
    for item in items:
        ref = normalize_reference(item)
        if ref and ref not in out:
            out.append(ref)
    return out


# ---------------------------------------------------------------------------
# Days, modality, time, room
# ---------------------------------------------------------------------------

DAY_CODES: dict[str, DayOfWeek] = {
    "U": DayOfWeek.SUNDAY,
    "M": DayOfWeek.MONDAY,
    "T": DayOfWeek.TUESDAY,
    "W": DayOfWeek.WEDNESDAY,
    "R": DayOfWeek.THURSDAY,
    "H": DayOfWeek.THURSDAY,
    "F": DayOfWeek.FRIDAY,
    "S": DayOfWeek.SATURDAY,
}


def expand_days(text: str) -> list[DayOfWeek]:
    """Expand a day field like "MWF" one letter at a time; unknown letters are skipped."""
    days: list[DayOfWeek] = []
    for ch in (text or "").upper():
        day = DAY_CODES.get(ch)
        if day is not None:
            days.append(day)
        elif not ch.isspace():
            logger.debug("Ignoring unknown day code %r in %r", ch, text)
    return days


def classify_modality(text: str) -> tuple[ActivityKind, DeliveryMode]:
    # precedence matters: "LECLAB" is a lecture
    upper = (text or "").upper()
    if "LEC" in upper:
        return ActivityKind.LECTURE, DeliveryMode.LECTURE
    if "LAB" in upper:
        return ActivityKind.LAB, DeliveryMode.LAB
    if "INT" in upper:
        return ActivityKind.INTERNSHIP, DeliveryMode.INTERNSHIP
    return ActivityKind.OTHER, DeliveryMode.OTHER


_CLOCK = re.compile(r"^(\d{1,2}):?(\d{2})\s*(?:([ap])\.?m?\.?)?$", re.IGNORECASE)


def _normalize_clock(text: str) -> Optional[str]:
    """'9:30', '0930', '930', '1:15 pm' -> zero-padded 'HH:MM'."""
    match = _CLOCK.match(text.strip())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = (match.group(3) or "").lower()

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "p" else 0)

    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def parse_time_slot(value: Any) -> Optional[TimeSlot]:
    """
    Parse "<start>-<end>" into a TimeSlot.

    Anything that is not exactly two hyphen-separated clock times, or that
    does not end after it starts, yields None.
    """
    text = _cell_text(value)
    if not text:
        return None

    parts = text.split("-")
    if len(parts) != 2:
        logger.debug("Malformed time field %r", text)
        return None

    start = _normalize_clock(parts[0])
    end = _normalize_clock(parts[1])
    if start is None or end is None:
        logger.debug("Unreadable clock time in %r", text)
        return None

    if end <= start:
        logger.debug("Time slot %r does not end after it starts", text)
        return None

    return TimeSlot(start, end)


def floor_from_room(room_code: str) -> int:
    """Floor is the first character of the room code, 0 when it is not a digit."""
    code = (room_code or "").strip()
    if code and code[0].isdigit():
        return int(code[0])
    return 0


def parse_room(building_code: str, room_code: str, directory: BuildingDirectory) -> Optional[Room]:
    building_code = (building_code or "").strip()
    if not building_code:
        return None
    room_code = (room_code or "").strip()
    return Room(
        building=directory.get(building_code),
        floor=floor_from_room(room_code),
        identifier=room_code,
    )


# ---------------------------------------------------------------------------
# Header and columns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnRole:
    name: str
    includes: tuple[str, ...]
    excludes: tuple[str, ...] = ()
    optional: bool = False

    def matches(self, header: str) -> bool:
        return any(token in header for token in self.includes) and not any(
            token in header for token in self.excludes
        )


COLUMN_ROLES: tuple[ColumnRole, ...] = (
    ColumnRole("crn", ("crn",)),
    ColumnRole("course", ("course",), excludes=("title",)),
    ColumnRole("title", ("title",)),
    ColumnRole("modality", ("modality",)),
    ColumnRole("days", ("days",)),
    ColumnRole("time", ("time",)),
    ColumnRole("building", ("building", "bldg")),
    ColumnRole("room", ("room",)),
    ColumnRole("instructor", ("instructor",), excludes=("email",)),
    ColumnRole("department", ("dept", "department"), optional=True),
    ColumnRole("email", ("email",), optional=True),
)


def resolve_columns(header: list[Any]) -> dict[str, Optional[int]]:
    """Map each role to the index of the first matching header cell (or None)."""
    texts = [_cell_text(cell).lower() for cell in header]

    columns: dict[str, Optional[int]] = {}
    for role in COLUMN_ROLES:
        columns[role.name] = next((i for i, h in enumerate(texts) if role.matches(h)), None)

    missing = [r.name for r in COLUMN_ROLES if not r.optional and columns[r.name] is None]
    if missing:
        logger.warning("Schedule has no column for: %s", ", ".join(missing))
    return columns


def _to_grid(rows: Any) -> list[list[Any]]:
    """
    Accept either sequences of cells or mappings of header -> cell.

    Mapping rows are turned into a grid whose first row is the header (the
    union of keys, in first-seen order).
    """
    if rows is None or isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        raise StructuralParseError("Schedule input must be a sequence of rows")

    materialized = [r for r in rows if r is not None]

    if materialized and all(isinstance(r, Mapping) for r in materialized):
        keys: list[Any] = []
        for r in materialized:
            for k in r:
                if k not in keys:
                    keys.append(k)
        return [list(keys)] + [[r.get(k) for k in keys] for r in materialized]

    grid: list[list[Any]] = []
    for r in materialized:
        if isinstance(r, (str, bytes, Mapping)) or not isinstance(r, Iterable):
            raise StructuralParseError(f"Schedule row is not a row of cells: {r!r}")
        grid.append(list(r))
    return grid


def _locate_header(grid: list[list[Any]]) -> int:
    for i, row in enumerate(grid):
        if any("CRN" in _cell_text(cell).upper() for cell in row):
            return i
    raise StructuralParseError("Could not find header row with CRN column")


def _cell(row: list[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ScheduleParser:
    """
    Turns decoded rows into CourseOffering objects.

    Course and Instructor caches live for one parse() call only, so two rows
    naming the same course share one Course instance within a schedule.
    """

    def __init__(self, directory: BuildingDirectory) -> None:
        self.directory = directory

    def parse(self, rows: Any) -> list[CourseOffering]:
        grid = _to_grid(rows)
        header_index = _locate_header(grid)
        columns = resolve_columns(grid[header_index])

        courses: dict[str, Course] = {}
        instructors: dict[str, Instructor] = {}
        offerings: list[CourseOffering] = []

        for row in grid[header_index + 1 :]:
            offering = self._parse_row(row, columns, courses, instructors)
            if offering is not None:
                offerings.append(offering)

        without_sessions = sum(1 for o in offerings if not o.sessions)
        logger.info(
            "Parsed %d offerings (%d without sessions), %d courses, %d instructors",
            len(offerings),
            without_sessions,
            len(courses),
            len(instructors),
        )
        return offerings

    def _parse_row(
        self,
        row: list[Any],
        columns: dict[str, Optional[int]],
        courses: dict[str, Course],
        instructors: dict[str, Instructor],
    ) -> Optional[CourseOffering]:
        def text(role: str) -> str:
            return _cell_text(_cell(row, columns[role]))

        reference = normalize_reference(_cell(row, columns["crn"]))
        if reference is None:
            return None

        # Get or create course
        code = text("course")
        course = courses.get(code)
        if course is None:
            course = Course(code=code, title=text("title"), department=text("department") or None)
            courses[code] = course

        # Get or create instructor
        instructor = self._instructor(text("instructor"), text("email"), instructors)

        activity, delivery_mode = classify_modality(text("modality"))
        time_slot = parse_time_slot(_cell(row, columns["time"]))
        room = parse_room(text("building"), text("room"), self.directory)
        days = text("days")

        sessions: list[MeetingSession] = []
        if time_slot and room and days:
            for day in expand_days(days):
                sessions.append(MeetingSession(day, time_slot, room, activity))

        return CourseOffering(
            reference=reference,
            course=course,
            delivery_mode=delivery_mode,
            sessions=tuple(sessions),
            instructors=(instructor,) if instructor else (),
        )

    @staticmethod
    def _instructor(name: str, email: str, cache: dict[str, Instructor]) -> Optional[Instructor]:
        full_name = " ".join(name.split())
        if not full_name:
            return None
        instructor = cache.get(full_name)
        if instructor is None:
            first, _, last = full_name.partition(" ")
            instructor = Instructor(first_name=first, last_name=last, email=email or None)
            cache[full_name] = instructor
        return instructor


def parse_schedule(rows: Any, directory: BuildingDirectory) -> list[CourseOffering]:
    return ScheduleParser(directory).parse(rows)
