"""
Central data model definitions used across the project.

This module defines the canonical structure of the schedule and route objects so that:
- parser, index, itinerary and route planner share the same field names
- derived artifacts (itineraries, route paths) only hold references into the schedule
- ordering and shape invariants are guaranteed at construction time

Buildings, courses and instructors are created once per load and then shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from campusroute.coordinates import NormalizedPoint
from campusroute.errors import ValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DayOfWeek(Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def from_name(cls, name: str) -> DayOfWeek:
        """
        Resolve a canonical day name ("Monday", "monday", " MONDAY ").

        Raises ValidationError for anything else.
        """
        key = (name or "").strip().lower()
        for day in cls:
            if day.value.lower() == key:
                return day
        raise ValidationError(f"Unknown day name: {name!r}")


class ActivityKind(Enum):
    LECTURE = "lecture"
    LAB = "lab"
    INTERNSHIP = "internship"
    OTHER = "other"


class DeliveryMode(Enum):
    LECTURE = "lecture"
    LAB = "lab"
    INTERNSHIP = "internship"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Places
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Building:
    """
    A campus building, keyed by the short code used in the schedule (e.g. "22").

    When no entrance points are registered the base location doubles as the entrance.
    """

    identifier: str
    name: str
    location: NormalizedPoint
    entrances: tuple[NormalizedPoint, ...] = ()

    @property
    def primary_entrance(self) -> NormalizedPoint:
        return self.entrances[0] if self.entrances else self.location


@dataclass(frozen=True)
class Room:
    building: Building
    floor: int
    identifier: str


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeSlot:
    """
    A start/end pair of zero-padded "HH:MM" strings.

    String comparison on zero-padded times is chronological, so slots are
    ordered and compared without converting to datetime objects.
    """

    start: str
    end: str

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValidationError(f"Time slot must end after it starts: {self.start}-{self.end}")

    def overlaps(self, other: TimeSlot) -> bool:
        # start < other_end AND end > other_start
        return self.start < other.end and self.end > other.start

    @property
    def duration_minutes(self) -> int:
        return _minutes(self.end) - _minutes(self.start)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


# ---------------------------------------------------------------------------
# Schedule entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MeetingSession:
    """One day/time/room occurrence of an offering."""

    day: DayOfWeek
    time_slot: TimeSlot
    room: Room
    activity: ActivityKind = ActivityKind.OTHER

    @property
    def building(self) -> Building:
        return self.room.building


@dataclass(frozen=True)
class Course:
    code: str
    title: str
    department: Optional[str] = None


@dataclass(frozen=True)
class Instructor:
    first_name: str
    last_name: str
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class CourseOffering:
    """
    One scheduled section of a course, identified by its reference number (CRN).
    """

    reference: str
    course: Course
    delivery_mode: DeliveryMode
    sessions: tuple[MeetingSession, ...] = ()
    instructors: tuple[Instructor, ...] = ()

    def sessions_on(self, day: DayOfWeek) -> list[MeetingSession]:
        return [s for s in self.sessions if s.day == day]


# ---------------------------------------------------------------------------
# Derived artifacts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItineraryEntry:
    offering: CourseOffering
    session: MeetingSession

    @property
    def start(self) -> str:
        return self.session.time_slot.start


@dataclass(frozen=True)
class DailyItinerary:
    """
    The time-ordered meetings of one day.

    Entries are sorted by start time when the itinerary is created (stable for
    equal starts). The entries tuple cannot be mutated, so the order holds for
    the lifetime of the object; use with_entries() to derive a larger itinerary.
    """

    day: DayOfWeek
    entries: tuple[ItineraryEntry, ...] = ()

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.entries, key=lambda e: e.start))
        object.__setattr__(self, "entries", ordered)

    def with_entries(self, *entries: ItineraryEntry) -> DailyItinerary:
        return DailyItinerary(self.day, self.entries + tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class RouteSegment:
    origin: Building
    destination: Building
    distance_m: float

    def __post_init__(self) -> None:
        if self.distance_m < 0:
            raise ValidationError(f"Segment distance cannot be negative: {self.distance_m!r}")


@dataclass(frozen=True)
class RoutePath:
    """
    Buildings in visiting order plus the segments between consecutive stops.

    Consecutive duplicates are kept (two classes in the same building), so
    there is always exactly one segment fewer than buildings.
    """

    buildings: tuple[Building, ...] = ()
    segments: tuple[RouteSegment, ...] = ()

    def __post_init__(self) -> None:
        expected = max(len(self.buildings) - 1, 0)
        if len(self.segments) != expected:
            raise ValidationError(
                f"Route with {len(self.buildings)} buildings needs {expected} segments, "
                f"got {len(self.segments)}"
            )

    @property
    def total_distance_m(self) -> float:
        return sum(s.distance_m for s in self.segments)

    def is_empty(self) -> bool:
        return not self.buildings


@dataclass(frozen=True)
class RouteVisualizationModel:
    """
    Everything a renderer needs: the offerings involved, the route and the
    summary text. References that could not be resolved are carried along so
    the caller can report them.
    """

    day: DayOfWeek
    offerings: tuple[CourseOffering, ...]
    route: RoutePath
    summary_lines: tuple[str, ...]
    missing_references: tuple[str, ...] = ()
