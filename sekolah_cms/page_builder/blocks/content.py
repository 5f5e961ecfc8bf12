"""Text blocks — heading, paragraph, quote, list, callout, divider, spacer."""
from typing import ClassVar, List

from pydantic import Field

from .base import BlockData


class HeadingData(BlockData):
    block_type: ClassVar[str] = "heading"
    level: int = 2
    text: str = ""
    align: str = "left"


class ParagraphData(BlockData):
    block_type: ClassVar[str] = "paragraph"
    text: str = ""
    align: str = "left"


class QuoteData(BlockData):
    block_type: ClassVar[str] = "quote"
    text: str = ""
    author: str = ""
    source: str = ""


class ListData(BlockData):
    block_type: ClassVar[str] = "list"
    type: str = "unordered"
    items: List[str] = Field(default_factory=lambda: [""])


class CalloutData(BlockData):
    block_type: ClassVar[str] = "callout"
    type: str = "info"
    title: str = ""
    text: str = ""


class DividerData(BlockData):
    block_type: ClassVar[str] = "divider"


class SpacerData(BlockData):
    block_type: ClassVar[str] = "spacer"
    height: str = "md"
