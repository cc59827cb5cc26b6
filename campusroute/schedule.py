"""
Schedule index: all offerings of one loaded schedule, keyed by reference number.

A CRN can appear on several rows (typically a lecture row and a lab row of the
same section). How those rows are combined is a DuplicatePolicy:

- FIRST: keep the first row, drop later ones
- LAST:  later rows replace earlier ones
- MERGE: later rows add their sessions to the first offering (default)
"""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import Iterable, Optional

from campusroute import config
from campusroute.model import CourseOffering
from campusroute.parse import normalize_reference

logger = logging.getLogger(__name__)


class DuplicatePolicy(Enum):
    FIRST = "first"
    LAST = "last"
    MERGE = "merge"


def _merge(existing: CourseOffering, duplicate: CourseOffering) -> CourseOffering:
    # course and delivery mode stay with the first row; instructor only fills a gap
    instructors = existing.instructors or duplicate.instructors
    return dataclasses.replace(
        existing,
        sessions=existing.sessions + duplicate.sessions,
        instructors=instructors,
    )


class ScheduleIndex:
    def __init__(self, offerings_by_reference: dict[str, CourseOffering]) -> None:
        self._by_reference = offerings_by_reference

    @classmethod
    def build(
        cls,
        offerings: Iterable[CourseOffering],
        policy: DuplicatePolicy | str = config.DEFAULT_DUPLICATE_POLICY,
    ) -> ScheduleIndex:
        policy = DuplicatePolicy(policy)
        by_reference: dict[str, CourseOffering] = {}
        duplicates = 0

        for offering in offerings:
            existing = by_reference.get(offering.reference)
            if existing is None:
                by_reference[offering.reference] = offering
                continue

            duplicates += 1
            if policy is DuplicatePolicy.LAST:
                by_reference[offering.reference] = offering
            elif policy is DuplicatePolicy.MERGE:
                by_reference[offering.reference] = _merge(existing, offering)

        if duplicates:
            logger.info("Combined %d duplicate CRN rows using policy %r", duplicates, policy.value)
        return cls(by_reference)

    def find_by_reference(self, reference: object) -> Optional[CourseOffering]:
        ref = normalize_reference(reference)
        if ref is None:
            return None
        return self._by_reference.get(ref)

    def find_all_by_references(self, references: Iterable[object]) -> list[CourseOffering]:
        """Found offerings in the order requested; misses are skipped."""
        out: list[CourseOffering] = []
        for reference in references:
            offering = self.find_by_reference(reference)
            if offering is not None:
                out.append(offering)
        return out

    def lookup(self, references: Iterable[object]) -> tuple[list[CourseOffering], list[str]]:
        """Like find_all_by_references(), but also report the normalized misses."""
        found: list[CourseOffering] = []
        missing: list[str] = []
        for reference in references:
            offering = self.find_by_reference(reference)
            if offering is not None:
                found.append(offering)
            else:
                ref = normalize_reference(reference)
                if ref is not None:
                    missing.append(ref)
        return found, missing

    def all_offerings(self) -> list[CourseOffering]:
        return list(self._by_reference.values())

    @staticmethod
    def course_codes(offerings: Iterable[CourseOffering]) -> list[str]:
        """Unique course codes, sorted case-insensitively."""
        codes: dict[str, str] = {}
        for offering in offerings:
            code = offering.course.code
            if code:
                codes.setdefault(code.lower(), code)
        return [codes[k] for k in sorted(codes)]

    def __contains__(self, reference: object) -> bool:
        return self.find_by_reference(reference) is not None

    def __len__(self) -> int:
        return len(self._by_reference)
