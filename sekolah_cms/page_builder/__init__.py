"""
page_builder — block model, sequence editor and HTML renderer for page/post content.
"""
from .blocks import Block, BLOCK_TYPES, default_data, load_blocks, dump_blocks
from .renderer import render_block, render_blocks

__all__ = ["Block", "BLOCK_TYPES", "default_data", "load_blocks", "dump_blocks", "render_block", "render_blocks"]
