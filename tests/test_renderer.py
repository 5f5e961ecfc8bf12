"""
Tests HTML rendering: escaping, placeholders, columns, embed records.
"""
from sekolah_cms.page_builder.blocks import Block
from sekolah_cms.page_builder.renderer.html import render_block, render_blocks, video_embed_url


class TestContentBlocks:

    def test_heading_level_and_text(self):
        html = render_block(Block(id="h", type="heading", data={"text": "Visi & Misi", "level": 3}))
        assert html.startswith("<h3")
        assert "Visi &amp; Misi" in html

    def test_invalid_level_falls_back(self):
        html = render_block(Block(id="h", type="heading", data={"text": "x", "level": 9}))
        assert html.startswith("<h2")

    def test_script_is_escaped(self):
        html = render_block(Block(id="p", type="paragraph", data={"text": "<script>alert(1)</script>"}))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_javascript_url_dropped(self):
        html = render_block(Block(id="i", type="image", data={"src": "javascript:alert(1)"}))
        assert "javascript:" not in html

    def test_unknown_type_placeholder(self):
        html = render_block(Block(id="u", type="carousel-3d", data={}))
        assert "block-unknown" in html
        assert "carousel-3d" in html

    def test_blocks_wrapped_in_order(self):
        html = render_blocks([
            Block(id="a", type="heading", data={"text": "Satu"}),
            Block(id="b", type="paragraph", data={"text": "Dua"}),
        ])
        assert html.index('id="block-a"') < html.index('id="block-b"')

    def test_stats_number_format(self):
        html = render_block(Block(id="s", type="stats-counter",
                                  data={"items": [{"value": 1250, "label": "Siswa", "suffix": "+"}]}))
        assert "1.250+" in html


class TestColumns:

    def test_nested_cells_render(self):
        html = render_block(Block(id="c", type="columns", data={
            "columns": 2,
            "cells": [[{"id": "n1", "type": "heading", "data": {"text": "Kiri"}}],
                      [{"id": "n2", "type": "paragraph", "data": {"text": "Kanan"}}]],
        }))
        assert "Kiri" in html and "Kanan" in html
        assert html.count("block-columns__cell") == 2

    def test_missing_cells_padded(self):
        html = render_block(Block(id="c", type="columns", data={"columns": 3, "cells": []}))
        assert html.count("block-columns__cell") == 3


class TestEmbeds:

    def test_staff_records(self):
        b = Block(id="sg", type="staff-grid", data={"limit": 1})
        html = render_block(b, {"sg": [{"name": "Bu Sari", "position": "Guru"}, {"name": "Pak Budi", "position": "Guru"}]})
        assert "Bu Sari" in html
        assert "Pak Budi" not in html

    def test_empty_embed(self):
        html = render_block(Block(id="n", type="news-list", data={}))
        assert "Belum ada data" in html

    def test_map_iframe(self):
        html = render_block(Block(id="m", type="google-map", data={}),
                            {"m": [{"latitude": -6.2, "longitude": 106.8, "address": "Jakarta"}]})
        assert "maps.google.com" in html


class TestVideoUrl:

    def test_youtube(self):
        assert video_embed_url("https://www.youtube.com/watch?v=abc123", "youtube") == "https://www.youtube.com/embed/abc123"

    def test_vimeo(self):
        assert video_embed_url("https://vimeo.com/42", "vimeo") == "https://player.vimeo.com/video/42"
