"""BOQ aggregation, DPWH classification, pay-item catalog and report."""

from qto.boq.aggregator import BOQAggregator, BOQResult, BOQSummary, boq_line_id, generate_boq
from qto.boq.catalog import (
    CatalogProvider,
    LocalCatalog,
    get_base_item_number,
    get_trade_from_pay_item,
    is_valid_pay_item_format,
    normalize_pay_item_number,
    normalize_unit,
    pay_items_match,
)
from qto.boq.classifier import Classification, Part, classify, part_rank, sort_parts
from qto.boq.report import BOQReport

__all__ = [
    "BOQAggregator",
    "BOQReport",
    "BOQResult",
    "BOQSummary",
    "CatalogProvider",
    "Classification",
    "LocalCatalog",
    "Part",
    "boq_line_id",
    "classify",
    "generate_boq",
    "get_base_item_number",
    "get_trade_from_pay_item",
    "is_valid_pay_item_format",
    "normalize_pay_item_number",
    "normalize_unit",
    "part_rank",
    "pay_items_match",
    "sort_parts",
]
