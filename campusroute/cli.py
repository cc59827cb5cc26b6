"""
CLI (Command Line Interface).

This module provides terminal commands on top of CampusRouteService, e.g.:

    campusroute route schedule.xlsx --buildings buildings.csv --image-size 1600x1200 \\
        --crn "61234, 61235" --day Monday
    campusroute conflicts schedule.xlsx --buildings buildings.csv --map-image map.png \\
        --crn "61234, 61235" --day Monday
    campusroute buildings --buildings buildings.csv --map-image map.png

Note:
- Drawing the route on the map is left to a renderer; this CLI prints the
  summary, the walking segments and any CRNs that were not found
- Exit codes: 0 ok, 1 error / nothing found, 2 usage error
"""

from __future__ import annotations

import argparse
import logging

import requests
from rich import box
from rich.console import Console
from rich.table import Table

from campusroute import config
from campusroute.distance import DistanceEstimator
from campusroute.errors import CampusRouteError
from campusroute.model import DayOfWeek
from campusroute.parse import parse_reference_list
from campusroute.readers import read_building_rows, read_image_size, read_schedule_rows
from campusroute.schedule import DuplicatePolicy
from campusroute.service import CampusRouteService

console = Console()


def _image_size(text: str) -> tuple[float, float]:
    """Parse '1600x1200' into (1600.0, 1200.0)."""
    width, sep, height = text.lower().partition("x")
    try:
        size = (float(width), float(height))
    except ValueError:
        size = None
    if not sep or size is None or size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    return size


def _day(text: str) -> DayOfWeek:
    try:
        return DayOfWeek.from_name(text)
    except ValueError:
        names = ", ".join(d.value for d in DayOfWeek)
        raise argparse.ArgumentTypeError(f"day must be one of: {names}") from None


def _build_service(args: argparse.Namespace) -> CampusRouteService:
    """
    Load the building directory (and the schedule, for commands that take one).
    """
    estimator = DistanceEstimator(reference_distance_m=args.calibration_distance)
    service = CampusRouteService(estimator=estimator, duplicate_policy=args.duplicates)

    if args.map_image:
        width, height = read_image_size(args.map_image)
    else:
        width, height = args.image_size

    service.load_buildings(read_building_rows(args.buildings), width, height)

    schedule = getattr(args, "schedule", None)
    if schedule:
        service.load_schedule(read_schedule_rows(schedule))
    return service


def _cmd_route(args: argparse.Namespace, service: CampusRouteService) -> int:
    """
    Print the walking route for the selected CRNs on one day.
    """
    refs = parse_reference_list(args.crn)
    if not refs:
        print("Please enter at least one CRN.")
        return 1

    model = service.query(refs, args.day)

    if model.missing_references:
        missing = ", ".join(model.missing_references)
        console.print(
            f"Warning: the following CRNs were not found: {missing}. Continuing with found courses.",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    if len(model.missing_references) == len(refs):
        print("No courses found for the entered CRNs.")
        return 1

    if model.route.is_empty():
        print(f"No classes found for {args.day.value}. The selected courses may not meet on this day.")
        return 0

    for line in model.summary_lines:
        console.print(line, markup=False, highlight=False)

    if model.route.segments:
        table = Table(title="Walking segments", box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Meters", justify="right")
        for i, seg in enumerate(model.route.segments, start=1):
            table.add_row(
                str(i),
                f"{seg.origin.identifier} {seg.origin.name}",
                f"{seg.destination.identifier} {seg.destination.name}",
                f"{seg.distance_m:.0f}",
            )
        console.print(table)

    return 0


def _cmd_conflicts(args: argparse.Namespace, service: CampusRouteService) -> int:
    """
    Print all overlapping meetings among the selected CRNs on one day.
    """
    confs = service.conflicts(args.crn, args.day)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(
            f"- {a.session.time_slot} {a.offering.reference} {a.offering.course.code}"
            f"  <->  {b.session.time_slot} {b.offering.reference} {b.offering.course.code}"
        )
    return 0


def _cmd_buildings(args: argparse.Namespace, service: CampusRouteService) -> int:
    buildings = service.directory.all_buildings()
    if not buildings:
        print("No buildings loaded.")
        return 1

    table = Table(title=f"Buildings ({len(buildings)})", box=box.SIMPLE)
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Entrances", justify="right")
    for b in buildings:
        table.add_row(
            b.identifier,
            b.name,
            f"{b.location.x:.3f}",
            f"{b.location.y:.3f}",
            str(len(b.entrances)),
        )
    console.print(table)
    print(f"Scale: {service.estimator.meters_per_unit:.1f} m per map unit")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    # options shared by every sub-command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--buildings", required=True, help="Building CSV file or http(s) URL")
    image = common.add_mutually_exclusive_group(required=True)
    image.add_argument("--map-image", type=str, help="Reference campus image (its size is used)")
    image.add_argument("--image-size", type=_image_size, help="Reference image size, e.g. 1600x1200")
    common.add_argument(
        "--duplicates",
        choices=[p.value for p in DuplicatePolicy],
        default=config.DEFAULT_DUPLICATE_POLICY,
        help="How rows sharing a CRN are combined",
    )
    common.add_argument(
        "--calibration-distance",
        type=float,
        default=config.CALIBRATION_DISTANCE_M,
        help="Meters between the two calibration buildings",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Show diagnostic logging")

    parser = argparse.ArgumentParser(prog="campusroute", description="Campus walking routes from a course schedule")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("route", "Show the walking route for a day"),
        ("conflicts", "Show overlapping meetings for a day"),
    ):
        p = sub.add_parser(name, help=help_text, parents=[common])
        p.add_argument("schedule", type=str, help="Schedule file (.csv, .xlsx, .xls, .html)")
        p.add_argument("--crn", required=True, help="Comma-separated CRNs (e.g. '61234, 61235')")
        p.add_argument("--day", required=True, type=_day, help="Day name (e.g. Monday)")

    sub.add_parser("buildings", help="List the building directory", parents=[common])

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, loads the data, dispatches to command
    handlers, and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        service = _build_service(args)

        if args.command == "route":
            raise SystemExit(_cmd_route(args, service))
        if args.command == "conflicts":
            raise SystemExit(_cmd_conflicts(args, service))
        if args.command == "buildings":
            raise SystemExit(_cmd_buildings(args, service))
    except (CampusRouteError, OSError, requests.RequestException) as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)

    raise SystemExit(2)
