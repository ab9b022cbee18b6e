"""BOQReport model and Markdown generation for BOQ.md."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from qto.boq.classifier import Part, classify, sort_parts
from qto.models.takeoff import BOQLine


class BOQReport:
    """Bill of Quantities grouped by DPWH part and subcategory."""

    def __init__(
        self,
        project_name: str = "",
        boq_lines: list[BOQLine] | None = None,
        warnings: list[str] | None = None,
        errors: list[str] | None = None,
        generated_at: datetime | None = None,
    ) -> None:
        self.project_name = project_name
        self.boq_lines = boq_lines or []
        self.warnings = warnings or []
        self.errors = errors or []
        self.generated_at = generated_at or datetime.now(timezone.utc)

    def grouped(self) -> dict[Part, dict[str, list[BOQLine]]]:
        """Lines keyed by part (in contract order), then subcategory."""
        buckets: dict[Part, dict[str, list[BOQLine]]] = {}
        for line in self.boq_lines:
            result = classify(line.dpwh_item_number_raw, line.tag_value("trade"))
            buckets.setdefault(result.part, {}).setdefault(result.subcategory, []).append(line)
        ordered: dict[Part, dict[str, list[BOQLine]]] = {}
        for part in sort_parts(buckets):
            subs = buckets[part]
            ordered[part] = {
                name: sorted(subs[name], key=lambda ln: ln.dpwh_item_number_raw)
                for name in sorted(subs)
            }
        return ordered

    def to_markdown(self) -> str:
        """Generate BOQ.md content."""
        lines: list[str] = []

        lines.append(f"# Bill of Quantities — {self.project_name or 'Untitled'}")
        lines.append("")
        lines.append(f"**Generated:** {self.generated_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(f"**Summary:** {len(self.boq_lines)} lines, {len(self.errors)} errors, {len(self.warnings)} warnings")
        lines.append("")

        for part, subcategories in self.grouped().items():
            lines.append(f"## {part.label}")
            lines.append("")
            for subcategory, boq_lines in subcategories.items():
                lines.append(f"### {subcategory}")
                lines.append("")
                lines.append("| Item No. | Description | Unit | Quantity |")
                lines.append("|----------|-------------|------|----------|")
                for line in boq_lines:
                    lines.append(
                        f"| {line.dpwh_item_number_raw} | {line.description} | {line.unit} | {line.quantity:,.3f} |"
                    )
                lines.append("")

        if self.errors:
            lines.append("## Errors")
            lines.append("")
            for err in self.errors:
                lines.append(f"- {err}")
            lines.append("")

        if self.warnings:
            lines.append("## Warnings")
            lines.append("")
            for warn in self.warnings:
                lines.append(f"- {warn}")
            lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Return structured JSON for audit trail."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_dict(self) -> dict[str, Any]:
        """Return dict representation."""
        return {
            "project_name": self.project_name,
            "generated_at": self.generated_at.isoformat(),
            "parts": [
                {
                    "part": part.value,
                    "part_name": part.part_name,
                    "subcategories": {
                        name: [line.model_dump(mode="json") for line in boq_lines]
                        for name, boq_lines in subs.items()
                    },
                }
                for part, subs in self.grouped().items()
            ],
            "warnings": self.warnings,
            "errors": self.errors,
        }
