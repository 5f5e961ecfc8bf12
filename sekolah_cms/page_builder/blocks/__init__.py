"""
Blocks — public exports + registry of block types.
Every type maps to its BlockData model; the renderer checks at import time
that each registered type has a render case.
"""
import logging
from typing import Any, Dict, Optional, Type

from pydantic import ValidationError

from .base import Block, BlockData
from .content import (
    HeadingData, ParagraphData, QuoteData, ListData, CalloutData, DividerData, SpacerData,
)
from .media import ImageData, VideoData
from .hero import HeroData
from .layout import ColumnsData, StatsCounterData, StatItem, TimelineData, TimelineItem, CTAData
from .embeds import (
    EMBED_TYPES,
    StaffGridData, NewsListData, GalleryEmbedData, TestimonialSliderData, ContactFormData,
    GoogleMapData, ProgramCardsData, FacilityShowcaseData, EventCalendarData,
    DownloadListData, AchievementListData,
)

log = logging.getLogger(__name__)

BLOCK_DATA: Dict[str, Type[BlockData]] = {
    cls.block_type: cls
    for cls in (
        HeadingData, ParagraphData, ImageData, VideoData, QuoteData, ListData,
        DividerData, SpacerData, CalloutData, ColumnsData, HeroData,
        StatsCounterData, TimelineData, CTAData,
        *EMBED_TYPES,
    )
}

BLOCK_TYPES = tuple(BLOCK_DATA)
EMBED_BLOCK_TYPES = tuple(cls.block_type for cls in EMBED_TYPES)


def is_known_type(block_type: str) -> bool:
    return block_type in BLOCK_DATA


def default_data(block_type: str) -> Dict[str, Any]:
    """Default payload for a type; unknown types get an empty dict."""
    cls = BLOCK_DATA.get(block_type)
    return cls().to_json() if cls else {}


def parse_data(block: Block) -> Optional[BlockData]:
    """Typed view over a block's payload. None for unknown types; a payload
    that does not validate falls back to the type defaults."""
    cls = BLOCK_DATA.get(block.type)
    if cls is None:
        return None
    try:
        return cls.model_validate(block.data or {})
    except ValidationError as e:
        log.warning("Block %s (%s) has invalid data (%d errors), using defaults", block.id, block.type, e.error_count())
        return cls()


def load_blocks(raw: Any) -> list:
    """Parse a stored content value into Blocks. Entries without id/type are skipped."""
    if not isinstance(raw, list):
        return []
    blocks = []
    for item in raw:
        if isinstance(item, Block):
            blocks.append(item)
            continue
        try:
            blocks.append(Block.model_validate(item))
        except ValidationError:
            log.warning("Skipping malformed content entry: %r", item)
    return blocks


def dump_blocks(blocks: list) -> list:
    return [b.model_dump() for b in blocks]


__all__ = [
    "Block", "BlockData",
    "HeadingData", "ParagraphData", "QuoteData", "ListData", "CalloutData", "DividerData", "SpacerData",
    "ImageData", "VideoData", "HeroData",
    "ColumnsData", "StatsCounterData", "StatItem", "TimelineData", "TimelineItem", "CTAData",
    "StaffGridData", "NewsListData", "GalleryEmbedData", "TestimonialSliderData", "ContactFormData",
    "GoogleMapData", "ProgramCardsData", "FacilityShowcaseData", "EventCalendarData",
    "DownloadListData", "AchievementListData",
    "BLOCK_DATA", "BLOCK_TYPES", "EMBED_BLOCK_TYPES",
    "is_known_type", "default_data", "parse_data", "load_blocks", "dump_blocks",
]
