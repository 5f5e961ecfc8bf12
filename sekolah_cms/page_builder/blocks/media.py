"""Media blocks — image and embedded video."""
from typing import ClassVar, Optional

from .base import BlockData


class ImageData(BlockData):
    block_type: ClassVar[str] = "image"
    src: str = ""
    alt: str = ""
    caption: str = ""
    align: str = "center"
    width: Optional[int] = None
    height: Optional[int] = None


class VideoData(BlockData):
    block_type: ClassVar[str] = "video"
    src: str = ""
    type: str = "youtube"     # youtube | vimeo | file
    caption: str = ""
