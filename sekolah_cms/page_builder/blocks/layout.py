"""Layout and highlight blocks — columns, stats counter, timeline, CTA."""
from typing import Any, ClassVar, Dict, List

from pydantic import BaseModel, Field

from .base import BlockData


class ColumnsData(BlockData):
    block_type: ClassVar[str] = "columns"
    columns: int = 2
    gap: str = "md"
    # One list of nested block dicts per column
    cells: List[List[Dict[str, Any]]] = Field(default_factory=list)


class StatItem(BaseModel):
    value: float = 0
    label: str = ""
    prefix: str = ""
    suffix: str = ""


class StatsCounterData(BlockData):
    block_type: ClassVar[str] = "stats-counter"
    items: List[StatItem] = Field(default_factory=lambda: [StatItem()])


class TimelineItem(BaseModel):
    year: str = ""
    title: str = ""
    description: str = ""


class TimelineData(BlockData):
    block_type: ClassVar[str] = "timeline"
    items: List[TimelineItem] = Field(default_factory=list)


class CTAData(BlockData):
    block_type: ClassVar[str] = "cta"
    title: str = ""
    description: str = ""
    button_text: str = ""
    button_link: str = ""
