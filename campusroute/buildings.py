"""
Building directory.

Maps the building codes found in the schedule to named, located Building objects.

The directory is filled once from the building dataset (rows of
code, name, pixel-x, pixel-y[, entrance-x, entrance-y, ...]) and is read-only
afterwards, with one exception: get() creates a placeholder at the map center
for codes the dataset does not know. Every room in the schedule therefore
resolves to a drawable building, at the price of a possibly wrong position.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from campusroute import config
from campusroute.coordinates import NormalizedPoint, create_point, point_from_pixels
from campusroute.errors import ValidationError
from campusroute.model import Building

logger = logging.getLogger(__name__)


def _parse_float(value: object) -> Optional[float]:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return None


class BuildingDirectory:
    def __init__(self) -> None:
        self._buildings: dict[str, Building] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(
        self,
        rows: Iterable[Sequence[object]],
        image_width: float,
        image_height: float,
    ) -> int:
        """
        Register one building per dataset row and return how many were added.

        Rows with fewer than 4 fields are skipped, as are rows whose pixel
        fields are not numbers (typically the header line). Extra field pairs
        after the fourth are entrance points, in order.

        A row with pixels outside the image raises ValidationError and
        nothing is registered. A second successful call is a no-op.
        """
        if self._initialized:
            logger.debug("Building directory already initialized, ignoring reload")
            return 0

        # nothing is registered unless every row converts
        loaded: list[Building] = []
        for row in rows:
            fields = [str(f).strip() for f in row]
            if len(fields) < 4:
                continue

            pixel_x = _parse_float(fields[2])
            pixel_y = _parse_float(fields[3])
            if pixel_x is None or pixel_y is None:
                logger.debug("Skipping building row without pixel coordinates: %r", fields)
                continue

            location = point_from_pixels(pixel_x, pixel_y, image_width, image_height)
            entrances = self._parse_entrances(fields[4:], image_width, image_height)
            loaded.append(Building(fields[0], fields[1], location, entrances))

        for building in loaded:
            self.register(building)

        self._initialized = True
        logger.info("Loaded %d buildings", len(loaded))
        return len(loaded)

    @staticmethod
    def _parse_entrances(
        fields: Sequence[str],
        image_width: float,
        image_height: float,
    ) -> tuple[NormalizedPoint, ...]:
        entrances: list[NormalizedPoint] = []
        # consume complete (x, y) pairs only
        for i in range(0, len(fields) - 1, 2):
            ex = _parse_float(fields[i])
            ey = _parse_float(fields[i + 1])
            if ex is None or ey is None:
                continue
            entrances.append(point_from_pixels(ex, ey, image_width, image_height))
        return tuple(entrances)

    def register(self, building: Building) -> None:
        """Add or replace a building (replacing also drops a placeholder)."""
        self._buildings[building.identifier] = building

    def find(self, identifier: str) -> Optional[Building]:
        """Return the registered building or None, never creating one."""
        return self._buildings.get((identifier or "").strip())

    def get(self, identifier: str) -> Building:
        """
        Get-or-create lookup.

        Unknown codes get a placeholder named "Building <code>" at the map
        center, which is registered so later lookups return the same object.
        """
        key = (identifier or "").strip()
        if not key:
            raise ValidationError("Building identifier is required")

        existing = self._buildings.get(key)
        if existing is not None:
            return existing

        logger.warning("Unknown building %r, placing a placeholder at the map center", key)
        placeholder = Building(
            identifier=key,
            name=config.PLACEHOLDER_NAME.format(identifier=key),
            location=create_point(*config.PLACEHOLDER_LOCATION),
        )
        self._buildings[key] = placeholder
        return placeholder

    def all_buildings(self) -> list[Building]:
        return list(self._buildings.values())

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and identifier.strip() in self._buildings

    def __len__(self) -> int:
        return len(self._buildings)
