"""Exceptions raised inside the takeoff core.

None of these escape a run: the orchestrator and processors convert them
into accumulated ``errors`` / ``warnings`` strings.
"""

from __future__ import annotations


class TakeoffError(Exception):
    """Base class for takeoff failures."""


class GeometryError(TakeoffError, ValueError):
    """Element geometry could not be resolved from placement or template."""


class InvalidHeightError(GeometryError):
    """The upper level is not strictly above the lower level."""


class ElementSkipped(TakeoffError):
    """An element was skipped; the message is a warning, not an error."""
