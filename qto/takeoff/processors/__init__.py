"""Element processors — one per structural element type."""

from qto.geometry.engine import ElementGeometryEngine
from qto.takeoff.factory import TakeoffLineFactory
from qto.takeoff.processors.base import ElementProcessor, ProcessorOutput
from qto.takeoff.processors.beam import BeamProcessor
from qto.takeoff.processors.column import ColumnProcessor
from qto.takeoff.processors.foundation import FoundationProcessor
from qto.takeoff.processors.slab import SlabProcessor

PROCESSOR_REGISTRY: dict[str, type[ElementProcessor]] = {
    "beam": BeamProcessor,
    "column": ColumnProcessor,
    "slab": SlabProcessor,
    "foundation": FoundationProcessor,
}


def get_processor(
    element_type: str,
    geometry: ElementGeometryEngine,
    factory: TakeoffLineFactory,
) -> ElementProcessor | None:
    """Return a processor for *element_type*, or None if unsupported."""
    processor_cls = PROCESSOR_REGISTRY.get(element_type)
    if processor_cls is None:
        return None
    return processor_cls(geometry, factory)


__all__ = [
    "ElementProcessor",
    "ProcessorOutput",
    "BeamProcessor",
    "ColumnProcessor",
    "SlabProcessor",
    "FoundationProcessor",
    "PROCESSOR_REGISTRY",
    "get_processor",
]
