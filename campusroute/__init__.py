"""
campusroute: walking routes between the buildings of a course schedule.

Pipeline:
    schedule rows -> ScheduleParser -> ScheduleIndex -> DailyItinerary -> RoutePlanner

CampusRouteService wires the pieces together; readers.py decodes files into
rows, cli.py is the terminal front end.
"""

from campusroute.config import PACKAGE_DIR
from campusroute.errors import CampusRouteError, StructuralParseError, ValidationError
from campusroute.model import DayOfWeek, RouteVisualizationModel
from campusroute.parse import normalize_reference, parse_reference_list
from campusroute.service import CampusRouteService

__version__ = (PACKAGE_DIR / "VERSION").read_text(encoding="utf-8").strip()

__all__ = [
    "__version__",
    "CampusRouteError",
    "CampusRouteService",
    "DayOfWeek",
    "RouteVisualizationModel",
    "StructuralParseError",
    "ValidationError",
    "normalize_reference",
    "parse_reference_list",
]
