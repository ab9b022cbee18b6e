"""ElementGeometryEngine — placement + template properties to physical dimensions.

Per element type the resolution order is::

    placement.custom_geometry -> template.properties -> grid/levels -> GeometryError

Nothing here knows about waste, rounding, or material quantities.  The
returned geometry records carry plain floats plus the assumptions made
while resolving them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from qto.errors import ElementSkipped, GeometryError
from qto.geometry.grid import GridResolver, Span, is_span_token
from qto.geometry.levels import LevelResolver
from qto.geometry.properties import first_number, get_prop
from qto.models.project import ElementInstance, ElementTemplate, ElementType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BeamGeometry:
    width: float
    height: float
    length: float
    assumptions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ColumnGeometry:
    shape: str
    """'rectangular' or 'circular'."""

    height: float
    start_level: str
    end_level: str
    width: float = 0.0
    depth: float = 0.0
    diameter: float = 0.0
    assumptions: list[str] = field(default_factory=list)

    @property
    def is_circular(self) -> bool:
        return self.shape == "circular"


@dataclass(frozen=True)
class SlabGeometry:
    thickness: float
    x_length: float
    y_length: float
    assumptions: list[str] = field(default_factory=list)

    @property
    def area(self) -> float:
        return self.x_length * self.y_length


@dataclass(frozen=True)
class FoundationGeometry:
    """Either a mat (panel resolved like a slab) or an isolated footing."""

    mode: str
    """'mat' or 'isolated'."""

    length: float
    width: float
    depth: float
    assumptions: list[str] = field(default_factory=list)

    @property
    def is_mat(self) -> bool:
        return self.mode == "mat"

    @property
    def area(self) -> float:
        return self.length * self.width


Geometry = Union[BeamGeometry, ColumnGeometry, SlabGeometry, FoundationGeometry]


class ElementGeometryEngine:
    """Resolve element dimensions against one project's grid and levels."""

    def __init__(self, grid: GridResolver, levels: LevelResolver) -> None:
        self.grid = grid
        self.levels = levels

    def resolve(self, template: ElementTemplate, instance: ElementInstance) -> Geometry:
        """Dispatch on ``template.type``.

        Raises
        ------
        GeometryError
            If any required dimension cannot be resolved.
        ElementSkipped
            For a topmost-level column without an explicit end level.
        """
        kind = template.type
        logger.debug("Resolving %s geometry for %s", kind, instance.id)
        if kind == ElementType.BEAM:
            return self.beam(template, instance)
        if kind == ElementType.COLUMN:
            return self.column(template, instance)
        if kind == ElementType.SLAB:
            return self.slab(template, instance)
        if kind == ElementType.FOUNDATION:
            return self.foundation(template, instance)
        raise GeometryError(f"Unknown element type {kind!r} for instance {instance.id}")

    # -- Beam -------------------------------------------------------------

    def beam(self, template: ElementTemplate, instance: ElementInstance) -> BeamGeometry:
        custom = instance.placement.custom_geometry
        props = template.properties
        width = self._require("width", template, instance, custom, props)
        height = self._require("height", template, instance, custom, props)

        assumptions: list[str] = []
        length = first_number("length", custom, props)
        if length is not None:
            assumptions.append(f"Length: {length:.2f} m (explicit)")
        else:
            length, note = self._beam_length_from_grid(template, instance)
            assumptions.append(note)

        return BeamGeometry(width=width, height=height, length=length, assumptions=assumptions)

    def _beam_length_from_grid(
        self, template: ElementTemplate, instance: ElementInstance
    ) -> tuple[float, str]:
        ref = instance.placement.grid_ref or []
        if len(ref) == 2 and is_span_token(ref[0]) != is_span_token(ref[1]):
            # Positional order is X then Y; accept the swapped pair too.
            for x_token, y_token in ((ref[0], ref[1]), (ref[1], ref[0])):
                x_span = self.grid.span_of(x_token, "x")
                y_span = self.grid.span_of(y_token, "y")
                if x_span is None or y_span is None:
                    continue
                run_token, run = (x_token, x_span) if is_span_token(x_token) else (y_token, y_span)
                if run.length <= 0:
                    break
                return run.length, f"Length: {run.length:.2f} m from grid span {run_token}"
        raise GeometryError(
            f"Beam {instance.id} (Template: {template.name or template.id}): "
            f"Cannot determine length. Grid ref: [{', '.join(ref)}]. "
            f"{self.grid.describe()} "
            "A beam needs a 'length' property or one grid span plus one grid line."
        )

    # -- Column -----------------------------------------------------------

    def column(self, template: ElementTemplate, instance: ElementInstance) -> ColumnGeometry:
        custom = instance.placement.custom_geometry
        props = template.properties
        placement = instance.placement

        shape_value = get_prop(custom, "shape") or get_prop(props, "shape")
        shape = "circular" if str(shape_value or "").lower() == "circular" else "rectangular"

        start = self.levels.by_label(placement.level_id)
        if start is None:
            raise GeometryError(
                f"Column {instance.id}: level {placement.level_id!r} not found. "
                f"Available levels: [{', '.join(self.levels.labels())}]"
            )

        assumptions: list[str] = []
        if placement.end_level_id:
            end = self.levels.by_label(placement.end_level_id)
            if end is None:
                raise GeometryError(
                    f"Column {instance.id}: end level {placement.end_level_id!r} not found. "
                    f"Available levels: [{', '.join(self.levels.labels())}]"
                )
        else:
            end = self.levels.next_above(start.label)
            if end is None:
                raise ElementSkipped(
                    f"Column {instance.id} at {start.label} is on the top floor "
                    "with no end level; skipped (no roof-column height is assumed)"
                )
            assumptions.append(f"End level auto-detected: {start.label} → {end.label}")

        # Level order is checked even when the height is overridden
        height = self.levels.height_between(start, end)
        override = first_number("height", custom)
        if override is not None:
            height = override
            assumptions.append(f"Height: {height:.2f} m (custom override)")
        else:
            assumptions.append(f"Height: {start.label} → {end.label} = {height:.2f} m")

        if shape == "circular":
            diameter = self._require("diameter", template, instance, custom, props)
            return ColumnGeometry(
                shape=shape,
                height=height,
                start_level=start.label,
                end_level=end.label,
                diameter=diameter,
                assumptions=assumptions,
            )

        width = self._require("width", template, instance, custom, props)
        depth = self._require("depth", template, instance, custom, props)
        return ColumnGeometry(
            shape=shape,
            height=height,
            start_level=start.label,
            end_level=end.label,
            width=width,
            depth=depth,
            assumptions=assumptions,
        )

    # -- Slab -------------------------------------------------------------

    def slab(self, template: ElementTemplate, instance: ElementInstance) -> SlabGeometry:
        custom = instance.placement.custom_geometry
        thickness = self._require("thickness", template, instance, custom, template.properties)
        x_length, y_length, assumptions = self._panel(template, instance, "Slab")
        return SlabGeometry(
            thickness=thickness,
            x_length=x_length,
            y_length=y_length,
            assumptions=assumptions,
        )

    def _panel(
        self, template: ElementTemplate, instance: ElementInstance, label: str
    ) -> tuple[float, float, list[str]]:
        """Resolve a two-span panel; explicit xLength/yLength win over the grid."""
        custom = instance.placement.custom_geometry
        props = template.properties
        x_length = first_number("xLength", custom, props)
        y_length = first_number("yLength", custom, props)
        if x_length is not None and y_length is not None:
            return x_length, y_length, [f"Panel: {x_length:.2f} m × {y_length:.2f} m (explicit)"]

        ref = instance.placement.grid_ref or []
        if len(ref) == 2 and is_span_token(ref[0]) and is_span_token(ref[1]):
            for x_token, y_token in ((ref[0], ref[1]), (ref[1], ref[0])):
                x_span: Span | None = self.grid.span_of(x_token, "x")
                y_span: Span | None = self.grid.span_of(y_token, "y")
                if x_span is None or y_span is None:
                    continue
                gx = x_length if x_length is not None else x_span.length
                gy = y_length if y_length is not None else y_span.length
                if gx <= 0 or gy <= 0:
                    break
                return gx, gy, [
                    f"Panel: {x_token} ({gx:.2f} m) × {y_token} ({gy:.2f} m)"
                ]
        raise GeometryError(
            f"{label} {instance.id} (Template: {template.name or template.id}): "
            f"Cannot determine panel size. Grid ref: [{', '.join(ref)}]. "
            f"{self.grid.describe()} "
            "A panel needs two grid spans, one per axis."
        )

    # -- Foundation -------------------------------------------------------

    def foundation(
        self, template: ElementTemplate, instance: ElementInstance
    ) -> FoundationGeometry:
        custom = instance.placement.custom_geometry
        props = template.properties

        thickness = first_number("thickness", custom, props)
        if thickness is not None:
            x_length, y_length, assumptions = self._panel(template, instance, "Mat foundation")
            return FoundationGeometry(
                mode="mat",
                length=x_length,
                width=y_length,
                depth=thickness,
                assumptions=assumptions,
            )

        length = self._require("length", template, instance, custom, props)
        width = self._require("width", template, instance, custom, props)
        depth = self._require("depth", template, instance, custom, props)
        return FoundationGeometry(
            mode="isolated",
            length=length,
            width=width,
            depth=depth,
            assumptions=[f"Isolated footing {length:g} × {width:g} × {depth:g} m"],
        )

    # -- Helpers ----------------------------------------------------------

    @staticmethod
    def _require(key, template, instance, *sources) -> float:
        value = first_number(key, *sources)
        if value is None:
            raise GeometryError(
                f"{template.type.capitalize()} {instance.id} "
                f"(Template: {template.name or template.id}): "
                f"missing or non-positive '{key}'"
            )
        return value
