from .html import render_block, render_blocks, render_placeholder, video_embed_url

__all__ = ["render_block", "render_blocks", "render_placeholder", "video_embed_url"]
