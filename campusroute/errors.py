"""
Error types raised by campusroute.

Only two kinds of problems stop a pipeline:
- StructuralParseError: the schedule input has no header row or is not rows at all
- ValidationError: a value breaks a hard invariant (e.g. a coordinate outside [0,1])

Everything else (unknown buildings, malformed times, unknown day letters, ...)
is absorbed and logged by the module that meets it.
"""

from __future__ import annotations


class CampusRouteError(Exception):
    """Base class for all errors raised by this package."""


class StructuralParseError(CampusRouteError):
    """The schedule input cannot be interpreted as a table with a CRN header."""


class ValidationError(CampusRouteError, ValueError):
    """A value violates a domain invariant."""
