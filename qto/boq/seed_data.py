"""Embedded DPWH pay-item catalog subset — no external catalog file required.

Covers the structural defaults, the diameter-based rebar items, and the
earthwork/finishing items most often produced by schedule lines.
"""

from __future__ import annotations

from typing import Any

SOURCE = "DPWH Standard Specifications, Vol. II (Buildings), pay-item subset"

# item_number -> {description, unit, trade, category}
SEED_CATALOG: dict[str, dict[str, Any]] = {
    # Part C - Earthwork
    "800 (1)": {"description": "Clearing and Grubbing", "unit": "Lump Sum", "trade": "Earthwork", "category": "earthworks-clearing"},
    "800 (3) a1": {"description": "Individual Removal of Trees, 150-300 mm diameter", "unit": "Each", "trade": "Earthwork", "category": "earthworks-removal-trees"},
    "802 (1) a": {"description": "Removal of Structures and Obstructions", "unit": "Lump Sum", "trade": "Earthwork", "category": "earthworks-removal-structures"},
    "803 (1) a": {"description": "Structure Excavation, Common Soil", "unit": "Cubic Meter", "trade": "Earthwork", "category": "earthworks-structure-excavation"},
    "804 (1)": {"description": "Embankment from Common Excavation", "unit": "Cubic Meter", "trade": "Earthwork", "category": "earthworks-embankment"},
    # Part D - Concrete
    "900 (1) a": {"description": "Structural Concrete, Class A, 3000 psi, 28 days", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    "900 (1) b": {"description": "Structural Concrete, Class B, 2500 psi, 28 days", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    "900 (1) c": {"description": "Structural Concrete, Class A, 4000 psi, 28 days", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    "900 (1) d": {"description": "Structural Concrete, Class A, 5000 psi, 28 days", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    "900 (1) e": {"description": "Structural Concrete, Class P, 6000 psi, 28 days", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    "901 (1)": {"description": "Lean Concrete", "unit": "Cubic Meter", "trade": "Concrete", "category": "concrete"},
    # Part D - Reinforcing steel (uncoated / epoxy-coated, by grade)
    "902 (1) a1": {"description": "Reinforcing Steel (Deformed), Grade 40", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    "902 (1) a2": {"description": "Reinforcing Steel (Deformed), Grade 60", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    "902 (1) a3": {"description": "Reinforcing Steel (Deformed), Grade 80", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    "902 (2) a1": {"description": "Reinforcing Steel (Epoxy Coated), Grade 40", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    "902 (2) a2": {"description": "Reinforcing Steel (Epoxy Coated), Grade 60", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    "902 (2) a3": {"description": "Reinforcing Steel (Epoxy Coated), Grade 80", "unit": "Kilogram", "trade": "Rebar", "category": "reinforcing steel"},
    # Part D - Formwork
    "903 (1)": {"description": "Formworks and Falseworks", "unit": "Square Meter", "trade": "Formwork", "category": "formwork"},
    "903 (2)": {"description": "Formworks and Falseworks, Fair-faced Finish", "unit": "Square Meter", "trade": "Formwork", "category": "formwork"},
    # Part E - Finishing works
    "1001 (1)": {"description": "Sewer Line Works", "unit": "Lump Sum", "trade": "Plumbing", "category": "plumbing"},
    "1001 (2)": {"description": "Storm Drainage and Downspout", "unit": "Lump Sum", "trade": "Plumbing", "category": "drainage"},
    "1002 (1)": {"description": "Plumbing Fixtures", "unit": "Lump Sum", "trade": "Plumbing", "category": "plumbing"},
    "1003 (1)": {"description": "Carpentry and Joinery Works", "unit": "Square Meter", "trade": "Carpentry", "category": "carpentry"},
    "1004 (1)": {"description": "Hardware", "unit": "Lump Sum", "trade": "Hardware", "category": "hardware"},
    "1006 (1)": {"description": "Steel Doors and Frames", "unit": "Square Meter", "trade": "Doors & Windows", "category": "doors"},
    "1008 (1) a": {"description": "Aluminum Glass Windows, Sliding", "unit": "Square Meter", "trade": "Doors & Windows", "category": "windows"},
    "1009 (1)": {"description": "Glass and Glazing", "unit": "Square Meter", "trade": "Glass & Glazing", "category": "glazing"},
    "1010 (1)": {"description": "Waterproofing, Cementitious", "unit": "Square Meter", "trade": "Waterproofing", "category": "waterproofing"},
    "1013 (2) a": {"description": "Corrugated Metal Roofing, Pre-painted, 0.5 mm", "unit": "Square Meter", "trade": "Roofing", "category": "roofing"},
    "1018 (1)": {"description": "Glazed Tiles and Trims", "unit": "Square Meter", "trade": "Finishes", "category": "tiling"},
    "1027 (1)": {"description": "Cement Plaster Finish", "unit": "Square Meter", "trade": "Finishes", "category": "plastering"},
    "1032 (1) a": {"description": "Painting Works, Masonry/Concrete", "unit": "Square Meter", "trade": "Finishes", "category": "painting"},
    "1046 (2) a1": {"description": "CHB Non-Load Bearing, 100 mm", "unit": "Square Meter", "trade": "Finishes", "category": "masonry"},
    # Part F - Electrical
    "1100 (10)": {"description": "Conduits, Boxes and Fittings", "unit": "Lump Sum", "trade": "Electrical", "category": "electrical"},
}
