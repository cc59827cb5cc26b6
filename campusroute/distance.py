"""
Straight-line distance estimates between buildings.

Normalized map units are turned into meters with one scale factor. The scale
is calibrated from two reference buildings whose real separation is known;
when that is not possible the default scale is kept.
"""

from __future__ import annotations

import logging
from typing import Sequence

from campusroute import config
from campusroute.buildings import BuildingDirectory
from campusroute.model import Building

logger = logging.getLogger(__name__)


class DistanceEstimator:
    def __init__(
        self,
        meters_per_unit: float = config.DEFAULT_METERS_PER_UNIT,
        reference_buildings: Sequence[str] = config.CALIBRATION_BUILDINGS,
        reference_distance_m: float = config.CALIBRATION_DISTANCE_M,
    ) -> None:
        self.meters_per_unit = meters_per_unit
        self.reference_buildings = tuple(reference_buildings)
        self.reference_distance_m = reference_distance_m

    def calibrate(self, directory: BuildingDirectory) -> bool:
        """
        Derive meters_per_unit from the reference buildings.

        Returns False (and keeps the current scale) when a reference building
        is not registered or both sit on the same point. Never raises.
        """
        first_id, second_id = self.reference_buildings
        first = directory.find(first_id)
        second = directory.find(second_id)
        if first is None or second is None:
            logger.warning(
                "Calibration buildings %s/%s not found, using default scale %.1f m/unit",
                first_id,
                second_id,
                self.meters_per_unit,
            )
            return False

        separation = first.location.distance_to(second.location)
        if separation <= 0:
            logger.warning("Calibration buildings share a location, using default scale")
            return False

        self.meters_per_unit = self.reference_distance_m / separation
        logger.debug("Calibrated scale: %.1f m/unit", self.meters_per_unit)
        return True

    def distance(self, a: Building, b: Building) -> float:
        """Meters between the primary entrances of two buildings."""
        return a.primary_entrance.distance_to(b.primary_entrance) * self.meters_per_unit
