"""Hero block — title banner with optional background image and CTA."""
from typing import ClassVar

from .base import BlockData


class HeroData(BlockData):
    block_type: ClassVar[str] = "hero"
    title: str = ""
    subtitle: str = ""
    background_image: str = ""
    background_overlay: bool = True
    cta_text: str = ""
    cta_link: str = ""
    align: str = "center"
