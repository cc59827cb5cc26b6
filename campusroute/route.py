"""
Route planning.

Turns a daily itinerary into the ordered list of buildings to walk through,
the segments between them, and the summary text shown next to the map.
"""

from __future__ import annotations

from typing import Iterable

from campusroute.distance import DistanceEstimator
from campusroute.model import (
    Building,
    CourseOffering,
    DailyItinerary,
    RoutePath,
    RouteSegment,
    RouteVisualizationModel,
)


class RoutePlanner:
    def __init__(self, estimator: DistanceEstimator) -> None:
        self.estimator = estimator

    def build_route_path(self, itinerary: DailyItinerary) -> RoutePath:
        buildings: list[Building] = [entry.session.building for entry in itinerary.entries]

        # two classes in the same building give a zero-length segment
        segments = [
            RouteSegment(origin, destination, self.estimator.distance(origin, destination))
            for origin, destination in zip(buildings, buildings[1:])
        ]
        return RoutePath(tuple(buildings), tuple(segments))

    def build_summary(self, itinerary: DailyItinerary, route: RoutePath) -> list[str]:
        lines = [
            f"Selected Day: {itinerary.day.value}",
            f"Number of Courses: {len(itinerary.entries)}",
        ]
        if itinerary.entries:
            codes = ", ".join(entry.offering.course.code for entry in itinerary.entries)
            lines.append(f"Courses: {codes}")

        distinct = {building.identifier for building in route.buildings}
        lines.append(f"Buildings Visited: {len(distinct)}")
        lines.append(f"Total Distance: {route.total_distance_m:.0f} meters")
        return lines

    def build_visualization(
        self,
        itinerary: DailyItinerary,
        missing_references: Iterable[str] = (),
    ) -> RouteVisualizationModel:
        route = self.build_route_path(itinerary)
        return RouteVisualizationModel(
            day=itinerary.day,
            offerings=tuple(_unique_offerings(itinerary)),
            route=route,
            summary_lines=tuple(self.build_summary(itinerary, route)),
            missing_references=tuple(missing_references),
        )


def _unique_offerings(itinerary: DailyItinerary) -> list[CourseOffering]:
    seen: set[int] = set()
    out: list[CourseOffering] = []
    for entry in itinerary.entries:
        if id(entry.offering) not in seen:
            seen.add(id(entry.offering))
            out.append(entry.offering)
    return out
