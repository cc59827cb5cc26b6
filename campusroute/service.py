"""
Load and query operations, the entry points used by the UI layer.

    service = CampusRouteService()
    service.load(schedule_rows, building_rows, image_width, image_height)
    model = service.query("61234, 61235", "Monday")

Loading must happen after the I/O collaborators have produced the rows and the
image size; after that every query is a pure computation over resident data.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from campusroute import config
from campusroute.buildings import BuildingDirectory
from campusroute.conflicts import find_conflicts
from campusroute.distance import DistanceEstimator
from campusroute.errors import CampusRouteError
from campusroute.itinerary import build_itinerary
from campusroute.model import DailyItinerary, DayOfWeek, ItineraryEntry, RouteVisualizationModel
from campusroute.parse import ScheduleParser, parse_reference_list
from campusroute.route import RoutePlanner
from campusroute.schedule import DuplicatePolicy, ScheduleIndex

logger = logging.getLogger(__name__)


class CampusRouteService:
    def __init__(
        self,
        estimator: Optional[DistanceEstimator] = None,
        duplicate_policy: DuplicatePolicy | str = config.DEFAULT_DUPLICATE_POLICY,
    ) -> None:
        self.directory = BuildingDirectory()
        self.estimator = estimator or DistanceEstimator()
        self.planner = RoutePlanner(self.estimator)
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self.index: Optional[ScheduleIndex] = None

    def load_buildings(
        self,
        building_rows: Iterable[Sequence[object]],
        image_width: float,
        image_height: float,
    ) -> BuildingDirectory:
        self.directory.initialize(building_rows, image_width, image_height)
        self.estimator.calibrate(self.directory)
        return self.directory

    def load_schedule(self, rows: Any) -> ScheduleIndex:
        """
        Parse the schedule rows and replace the current index.

        StructuralParseError propagates; no partial index is kept.
        """
        offerings = ScheduleParser(self.directory).parse(rows)
        self.index = ScheduleIndex.build(offerings, self.duplicate_policy)
        return self.index

    def load(
        self,
        rows: Any,
        building_rows: Iterable[Sequence[object]],
        image_width: float,
        image_height: float,
    ) -> ScheduleIndex:
        # buildings first, so the parser resolves rooms against real entries
        self.load_buildings(building_rows, image_width, image_height)
        return self.load_schedule(rows)

    def itinerary(self, references: str | Iterable[Any], day: DayOfWeek | str) -> tuple[DailyItinerary, list[str]]:
        """Build the itinerary for the given CRNs and day; also return the CRNs not found."""
        if self.index is None:
            raise CampusRouteError("No schedule loaded")

        if not isinstance(day, DayOfWeek):
            day = DayOfWeek.from_name(day)

        refs = parse_reference_list(references)
        offerings, missing = self.index.lookup(refs)
        if missing:
            logger.info("CRNs not found: %s", ", ".join(missing))

        return build_itinerary(offerings, day), missing

    def query(self, references: str | Iterable[Any], day: DayOfWeek | str) -> RouteVisualizationModel:
        itinerary, missing = self.itinerary(references, day)
        return self.planner.build_visualization(itinerary, missing)

    def conflicts(
        self, references: str | Iterable[Any], day: DayOfWeek | str
    ) -> list[tuple[ItineraryEntry, ItineraryEntry]]:
        itinerary, _ = self.itinerary(references, day)
        return find_conflicts(itinerary)
