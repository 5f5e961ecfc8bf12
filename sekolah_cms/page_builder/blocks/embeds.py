"""
School embed blocks.
Their payload only holds query options (limit, filters); the records they
display are resolved by the caller and handed to the renderer.
"""
from typing import ClassVar

from .base import BlockData


class StaffGridData(BlockData):
    block_type: ClassVar[str] = "staff-grid"
    limit: int = 8
    show_all: bool = False


class NewsListData(BlockData):
    block_type: ClassVar[str] = "news-list"
    limit: int = 6
    category_id: str = ""


class GalleryEmbedData(BlockData):
    block_type: ClassVar[str] = "gallery-embed"
    gallery_id: str = ""


class TestimonialSliderData(BlockData):
    block_type: ClassVar[str] = "testimonial-slider"
    limit: int = 5


class ContactFormData(BlockData):
    block_type: ClassVar[str] = "contact-form"
    show_map: bool = True


class GoogleMapData(BlockData):
    block_type: ClassVar[str] = "google-map"
    height: int = 400


class ProgramCardsData(BlockData):
    block_type: ClassVar[str] = "program-cards"
    type: str = ""
    limit: int = 6


class FacilityShowcaseData(BlockData):
    block_type: ClassVar[str] = "facility-showcase"
    limit: int = 6


class EventCalendarData(BlockData):
    block_type: ClassVar[str] = "event-calendar"
    limit: int = 5


class DownloadListData(BlockData):
    block_type: ClassVar[str] = "download-list"
    category: str = ""
    limit: int = 10


class AchievementListData(BlockData):
    block_type: ClassVar[str] = "achievement-list"
    limit: int = 6


EMBED_TYPES = (
    StaffGridData, NewsListData, GalleryEmbedData, TestimonialSliderData,
    ContactFormData, GoogleMapData, ProgramCardsData, FacilityShowcaseData,
    EventCalendarData, DownloadListData, AchievementListData,
)
