"""
Conflict detection.

Given the itinerary of one day, detect meetings whose time slots overlap.
Overlap rule:
    start < other_end AND end > other_start
"""

from __future__ import annotations

from campusroute.model import DailyItinerary, ItineraryEntry


def find_conflicts(itinerary: DailyItinerary) -> list[tuple[ItineraryEntry, ItineraryEntry]]:
    """
    Find overlapping entry pairs (A,B), each pair appears once (A before B in
    itinerary order). Touching endpoints (end == start) are not a conflict.
    """
    conflicts: list[tuple[ItineraryEntry, ItineraryEntry]] = []
    entries = itinerary.entries

    # O(n^2) is fine for a single day of classes
    for i in range(len(entries)):
        a = entries[i]
        for j in range(i + 1, len(entries)):
            b = entries[j]
            # entries are sorted by start, nothing later can overlap a
            if b.start >= a.session.time_slot.end:
                break
            if a.session.time_slot.overlaps(b.session.time_slot):
                conflicts.append((a, b))

    return conflicts
