"""
Daily itinerary construction.

Given the offerings a student picked and one weekday, list every meeting of
that day in time order. An offering meeting twice on the same day contributes
two entries.
"""

from __future__ import annotations

from typing import Iterable

from campusroute.model import CourseOffering, DailyItinerary, DayOfWeek, ItineraryEntry


def build_itinerary(offerings: Iterable[CourseOffering], day: DayOfWeek) -> DailyItinerary:
    entries = [
        ItineraryEntry(offering, session)
        for offering in offerings
        for session in offering.sessions_on(day)
    ]
    # DailyItinerary sorts by start time (stable, so ties keep encounter order)
    return DailyItinerary(day, tuple(entries))
