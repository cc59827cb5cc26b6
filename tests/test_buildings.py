import logging
import unittest

from campusroute.buildings import BuildingDirectory
from campusroute.coordinates import create_point
from campusroute.errors import ValidationError
from campusroute.model import Building

ROWS = [
    ["code", "name", "pixel_x", "pixel_y"],
    ["11", "Library", "200", "300"],
    ["59", "Engineering", "600", "300", "620", "310", "640", "320"],
    ["incomplete", "row"],
]


class TestBuildingDirectory(unittest.TestCase):
    def setUp(self) -> None:
        self.directory = BuildingDirectory()
        self.added = self.directory.initialize(ROWS, 1000, 1000)

    def test_initialize_skips_header_and_short_rows(self) -> None:
        self.assertEqual(self.added, 2)
        self.assertEqual([b.identifier for b in self.directory.all_buildings()], ["11", "59"])

        library = self.directory.get("11")
        self.assertEqual(library.name, "Library")
        self.assertEqual(library.location, create_point(0.2, 0.3))

    def test_initialize_is_idempotent(self) -> None:
        again = self.directory.initialize([["77", "Gym", "10", "10"]], 1000, 1000)
        self.assertEqual(again, 0)
        self.assertNotIn("77", self.directory)
        self.assertEqual(len(self.directory), 2)

    def test_entrances_and_primary_entrance(self) -> None:
        eng = self.directory.get("59")
        self.assertEqual(eng.entrances, (create_point(0.62, 0.31), create_point(0.64, 0.32)))
        self.assertEqual(eng.primary_entrance, create_point(0.62, 0.31))

        # no entrances: the location is the entrance
        library = self.directory.get("11")
        self.assertEqual(library.entrances, ())
        self.assertEqual(library.primary_entrance, library.location)

    def test_unknown_identifier_gets_placeholder(self) -> None:
        with self.assertLogs("campusroute.buildings", level=logging.WARNING):
            placeholder = self.directory.get("99")

        self.assertEqual(placeholder.name, "Building 99")
        self.assertEqual(placeholder.location, create_point(0.5, 0.5))
        self.assertIn("99", self.directory)
        # registered: the same object comes back
        self.assertIs(self.directory.get("99"), placeholder)

    def test_find_never_creates(self) -> None:
        self.assertIsNone(self.directory.find("42"))
        self.assertNotIn("42", self.directory)
        self.assertIs(self.directory.find(" 11 "), self.directory.get("11"))

    def test_register_replaces_placeholder(self) -> None:
        self.directory.get("70")
        real = Building("70", "Student Center", create_point(0.1, 0.9))
        self.directory.register(real)
        self.assertIs(self.directory.get("70"), real)

    def test_blank_identifier_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.directory.get("  ")

    def test_out_of_range_pixels_fail_the_load(self) -> None:
        directory = BuildingDirectory()
        with self.assertRaises(ValidationError):
            directory.initialize([["1", "Far away", "5000", "10"]], 1000, 1000)

    def test_failed_load_registers_nothing(self) -> None:
        directory = BuildingDirectory()
        rows = [["11", "Library", "200", "300"], ["1", "Far away", "5000", "10"]]
        with self.assertRaises(ValidationError):
            directory.initialize(rows, 1000, 1000)

        self.assertEqual(len(directory), 0)
        self.assertFalse(directory.initialized)

        # a corrected dataset can still be loaded
        self.assertEqual(directory.initialize(rows[:1], 1000, 1000), 1)
        self.assertTrue(directory.initialized)
        self.assertEqual([b.identifier for b in directory.all_buildings()], ["11"])


if __name__ == "__main__":
    unittest.main()
