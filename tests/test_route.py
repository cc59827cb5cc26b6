"""
Unit tests for distance calibration and route planning.
"""

import unittest

from campusroute.buildings import BuildingDirectory
from campusroute.coordinates import create_point
from campusroute.distance import DistanceEstimator
from campusroute.errors import ValidationError
from campusroute.itinerary import build_itinerary
from campusroute.model import (
    ActivityKind,
    Building,
    Course,
    CourseOffering,
    DailyItinerary,
    DayOfWeek,
    DeliveryMode,
    MeetingSession,
    Room,
    RoutePath,
    RouteSegment,
    TimeSlot,
)
from campusroute.route import RoutePlanner

BUILDING_ROWS = [
    ["Code", "Name", "X", "Y"],
    ["11", "Library", "200", "300"],
    ["59", "Engineering", "600", "300"],
    ["22", "Science Hall", "200", "700"],
]


def _directory(rows=BUILDING_ROWS) -> BuildingDirectory:
    directory = BuildingDirectory()
    directory.initialize(rows, 1000, 1000)
    return directory


def _offering(ref, code, building, start, end, day=DayOfWeek.MONDAY):
    session = MeetingSession(day, TimeSlot(start, end), Room(building, 1, "101"), ActivityKind.LECTURE)
    return CourseOffering(ref, Course(code, code), DeliveryMode.LECTURE, (session,))


class TestDistanceEstimator(unittest.TestCase):
    def test_calibrate_from_reference_buildings(self) -> None:
        directory = _directory()
        estimator = DistanceEstimator()

        self.assertTrue(estimator.calibrate(directory))
        # 0.4 map units apart, 350 m in reality
        self.assertAlmostEqual(estimator.meters_per_unit, 875.0)
        self.assertAlmostEqual(estimator.distance(directory.get("11"), directory.get("59")), 350.0)

    def test_calibration_falls_back_to_default(self) -> None:
        directory = _directory([["11", "Library", "200", "300"]])
        estimator = DistanceEstimator()

        with self.assertLogs("campusroute.distance", level="WARNING"):
            self.assertFalse(estimator.calibrate(directory))
        self.assertEqual(estimator.meters_per_unit, 900.0)
        # calibration never creates placeholder buildings
        self.assertNotIn("59", directory)

    def test_calibration_rejects_coincident_buildings(self) -> None:
        directory = _directory([["11", "A", "100", "100"], ["59", "B", "100", "100"]])
        estimator = DistanceEstimator(meters_per_unit=500.0)
        with self.assertLogs("campusroute.distance", level="WARNING"):
            self.assertFalse(estimator.calibrate(directory))
        self.assertEqual(estimator.meters_per_unit, 500.0)

    def test_distance_uses_primary_entrance(self) -> None:
        estimator = DistanceEstimator(meters_per_unit=1000.0)
        a = Building("A", "A", create_point(0.0, 0.0), entrances=(create_point(0.3, 0.0),))
        b = Building("B", "B", create_point(0.6, 0.0))
        self.assertAlmostEqual(estimator.distance(a, b), 300.0)
        self.assertEqual(estimator.distance(b, b), 0.0)


class TestRoutePlanner(unittest.TestCase):
    def setUp(self) -> None:
        self.directory = _directory()
        estimator = DistanceEstimator()
        estimator.calibrate(self.directory)
        self.planner = RoutePlanner(estimator)

    def test_route_follows_itinerary_order(self) -> None:
        library = self.directory.get("11")
        engineering = self.directory.get("59")
        itinerary = build_itinerary(
            [
                _offering("2", "MA201", engineering, "11:00", "11:50"),
                _offering("1", "CS101", library, "09:00", "09:50"),
            ],
            DayOfWeek.MONDAY,
        )

        route = self.planner.build_route_path(itinerary)
        self.assertEqual([b.identifier for b in route.buildings], ["11", "59"])
        self.assertEqual(len(route.segments), 1)
        self.assertIs(route.segments[0].origin, library)
        self.assertAlmostEqual(route.total_distance_m, 350.0)

    def test_same_building_gives_zero_length_segment(self) -> None:
        library = self.directory.get("11")
        itinerary = build_itinerary(
            [
                _offering("1", "CS101", library, "09:00", "09:50"),
                _offering("2", "MA201", library, "10:00", "10:50"),
            ],
            DayOfWeek.MONDAY,
        )
        route = self.planner.build_route_path(itinerary)
        self.assertEqual(len(route.buildings), 2)
        self.assertEqual(route.segments[0].distance_m, 0.0)

    def test_summary_lines(self) -> None:
        library = self.directory.get("11")
        engineering = self.directory.get("59")
        itinerary = build_itinerary(
            [
                _offering("1", "CS101", library, "09:00", "09:50"),
                _offering("2", "MA201", engineering, "10:00", "10:50"),
                _offering("3", "PH105", library, "11:00", "11:50"),
            ],
            DayOfWeek.MONDAY,
        )
        model = self.planner.build_visualization(itinerary, ["99999"])

        self.assertEqual(
            list(model.summary_lines),
            [
                "Selected Day: Monday",
                "Number of Courses: 3",
                "Courses: CS101, MA201, PH105",
                "Buildings Visited: 2",
                "Total Distance: 700 meters",
            ],
        )
        self.assertEqual([o.reference for o in model.offerings], ["1", "2", "3"])
        self.assertEqual(model.missing_references, ("99999",))
        self.assertIs(model.day, DayOfWeek.MONDAY)

    def test_course_meeting_twice_is_listed_twice(self) -> None:
        library = self.directory.get("11")
        engineering = self.directory.get("59")
        sessions = (
            MeetingSession(DayOfWeek.MONDAY, TimeSlot("09:00", "09:50"), Room(library, 1, "101"), ActivityKind.LECTURE),
            MeetingSession(DayOfWeek.MONDAY, TimeSlot("14:00", "15:50"), Room(engineering, 0, "B12"), ActivityKind.LAB),
        )
        offering = CourseOffering("500", Course("BIO110", "Biology"), DeliveryMode.LECTURE, sessions)

        model = self.planner.build_visualization(build_itinerary([offering], DayOfWeek.MONDAY))

        # one line per meeting, while the offerings are unique
        self.assertIn("Number of Courses: 2", model.summary_lines)
        self.assertIn("Courses: BIO110, BIO110", model.summary_lines)
        self.assertEqual(len(model.offerings), 1)

    def test_empty_itinerary(self) -> None:
        model = self.planner.build_visualization(DailyItinerary(DayOfWeek.SUNDAY))
        self.assertTrue(model.route.is_empty())
        self.assertEqual(model.route.segments, ())
        self.assertEqual(
            list(model.summary_lines),
            [
                "Selected Day: Sunday",
                "Number of Courses: 0",
                "Buildings Visited: 0",
                "Total Distance: 0 meters",
            ],
        )


class TestRouteInvariants(unittest.TestCase):
    def test_segment_count_must_match(self) -> None:
        a = Building("A", "A", create_point(0.1, 0.1))
        b = Building("B", "B", create_point(0.2, 0.2))
        with self.assertRaises(ValidationError):
            RoutePath((a, b), ())
        with self.assertRaises(ValidationError):
            RoutePath((), (RouteSegment(a, b, 1.0),))
        self.assertEqual(RoutePath((a,), ()).total_distance_m, 0)

    def test_negative_distance_rejected(self) -> None:
        a = Building("A", "A", create_point(0.1, 0.1))
        with self.assertRaises(ValidationError):
            RouteSegment(a, a, -1.0)


if __name__ == "__main__":
    unittest.main()
