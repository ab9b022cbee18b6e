"""Project snapshot models — the parametric description of a building.

A snapshot is a labelled structural grid (two axes), a set of levels,
element templates, placed element instances, schedule items, and the
spaces, openings and finish assignments of the finishing works.  All of it
is reference data: the takeoff core reads it and never mutates it.

Input keys may be given in snake_case or in the camelCase used by the
surrounding application (``templateId``, ``gridRef``, ``rebarConfig`` ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from qto.config import DEFAULT_FINISH_ROUNDING
from qto.settings import ProjectSettings


class _InputModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ElementType(str, Enum):
    """Structural element kinds handled by the takeoff core."""

    BEAM = "beam"
    COLUMN = "column"
    SLAB = "slab"
    FOUNDATION = "foundation"


class GridLine(_InputModel):
    """One labelled grid line on an axis, offset in metres from the origin."""

    label: str
    offset: float


class Level(_InputModel):
    """A building level (floor) with its elevation in metres."""

    label: str
    elevation: float


class RebarGroup(_InputModel):
    """One bar group: a diameter plus either an explicit count or a spacing.

    Fields are optional here so that an incomplete group fails only its own
    rebar line; the rebar calculators reject what is missing.
    """

    diameter: float | None = None
    """Nominal bar diameter in mm."""

    count: float | None = None
    """Whole number of bars; checked by the rebar calculators."""

    spacing: float | None = None
    """Centre-to-centre spacing in metres."""


class RebarConfig(_InputModel):
    """Reinforcement configuration attached to a template."""

    main_bars: RebarGroup | None = None
    secondary_bars: RebarGroup | None = None
    stirrups: RebarGroup | None = None
    ties: RebarGroup | None = None
    dpwh_rebar_item: str | None = None
    """Explicit rebar pay item; overrides the diameter-based lookup."""


class ElementTemplate(_InputModel):
    """Reusable element type definition shared by many instances.

    ``properties`` is untyped: legacy snapshots store it as a
    key-value mapping, newer ones as a plain record object.  Read it only
    through :func:`qto.geometry.properties.get_prop`.
    """

    id: str
    type: str
    name: str = ""
    properties: Any = Field(default_factory=dict)
    rebar_config: RebarConfig | None = None
    dpwh_item_number: str | None = None
    """Concrete pay item for this template."""

    dpwh_formwork_item: str | None = None


class Placement(_InputModel):
    """Where an instance sits: start level, optional end level, grid tokens."""

    level_id: str
    end_level_id: str | None = None
    grid_ref: list[str] | None = None
    custom_geometry: dict[str, Any] | None = None
    """Per-instance overrides (numbers, plus ``shape`` for columns)."""


class ElementInstance(_InputModel):
    """One physically placed element."""

    id: str
    template_id: str
    placement: Placement
    tags: list[str] = Field(default_factory=list)


class ScheduleItem(_InputModel):
    """A directly scheduled quantity (doors, plumbing, earthwork, ...)."""

    id: str
    category: str = "other"
    dpwh_item_number_raw: str = ""
    unit: str = ""
    qty: float = 0.0
    basis_note: str = ""
    description_override: str | None = None
    tags: list[str] = Field(default_factory=list)


class FinishCategory(str, Enum):
    FLOOR = "floor"
    CEILING = "ceiling"
    WALL = "wall"
    PLASTER = "plaster"
    PAINT = "paint"


WALL_CATEGORIES = frozenset({"wall", "plaster", "paint"})


class BoundaryData(_InputModel):
    grid_x: list[str] | None = None
    """``[start, end]`` X-grid labels for a ``gridRect`` boundary."""

    grid_y: list[str] | None = None
    points: list[tuple[float, float]] | None = None
    """Polygon vertices in metres for a ``polygon`` boundary."""


class SpaceBoundary(_InputModel):
    type: str = "gridRect"
    data: BoundaryData = Field(default_factory=BoundaryData)


class Space(_InputModel):
    """A room or area on one level that receives finishes."""

    id: str
    name: str = ""
    level_id: str
    boundary: SpaceBoundary
    metadata: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class Opening(_InputModel):
    """A door, window or vent; deducted from wall finishes."""

    id: str
    level_id: str
    space_id: str | None = None
    """Limits the opening to one space; None applies it to every space on the level."""

    type: str = "other"
    width: float
    height: float
    qty: int = 1

    @property
    def area(self) -> float:
        return self.width * self.height * self.qty


class WallHeightRule(_InputModel):
    mode: str = "fullHeight"
    """``fullHeight`` (storey height) or ``fixed``."""

    value: float | None = None


class DeductionRule(_InputModel):
    enabled: bool = False
    min_opening_area: float = 0.0
    include_types: list[str] = Field(default_factory=list)
    """Opening types to deduct; empty deducts every type."""


class FinishType(_InputModel):
    """A finish specification: category, pay item and quantity rules."""

    id: str
    category: str
    finish_name: str = ""
    dpwh_item_number_raw: str = ""
    unit: str = "m²"
    wall_height_rule: WallHeightRule | None = None
    deduction_rule: DeductionRule | None = None
    waste: float = Field(default=0.0, ge=0.0, le=1.0)
    rounding: int = Field(default=DEFAULT_FINISH_ROUNDING, ge=0, le=6)


class FinishOverrides(_InputModel):
    height: float | None = None
    waste: float | None = Field(default=None, ge=0.0, le=1.0)


class FinishAssignment(_InputModel):
    """Applies one finish type to one space."""

    id: str
    space_id: str
    finish_type_id: str
    scope: str = ""
    overrides: FinishOverrides | None = None


class ProjectSnapshot(_InputModel):
    """Everything the takeoff core needs for one calculation run."""

    grid_x: list[GridLine] = Field(default_factory=list)
    grid_y: list[GridLine] = Field(default_factory=list)
    levels: list[Level] = Field(default_factory=list)
    element_templates: list[ElementTemplate] = Field(default_factory=list)
    element_instances: list[ElementInstance] = Field(default_factory=list)
    schedule_items: list[ScheduleItem] = Field(default_factory=list)
    spaces: list[Space] = Field(default_factory=list)
    openings: list[Opening] = Field(default_factory=list)
    finish_types: list[FinishType] = Field(default_factory=list)
    finish_assignments: list[FinishAssignment] = Field(default_factory=list)
    settings: ProjectSettings = Field(default_factory=ProjectSettings)
