"""
Tests block registry: defaults, typed parsing, tolerant loading.
"""
import pytest

from sekolah_cms.page_builder.blocks import (
    BLOCK_TYPES, EMBED_BLOCK_TYPES, Block, HeadingData, StaffGridData,
    default_data, dump_blocks, load_blocks, parse_data,
)


class TestRegistry:

    def test_all_types_registered(self):
        for t in ("heading", "paragraph", "image", "video", "quote", "list", "divider", "spacer",
                  "callout", "columns", "hero", "stats-counter", "timeline", "cta",
                  "staff-grid", "news-list", "gallery-embed", "testimonial-slider", "contact-form",
                  "google-map", "program-cards", "facility-showcase", "event-calendar",
                  "download-list", "achievement-list"):
            assert t in BLOCK_TYPES

    def test_embed_types_subset(self):
        assert set(EMBED_BLOCK_TYPES) <= set(BLOCK_TYPES)
        assert "heading" not in EMBED_BLOCK_TYPES

    @pytest.mark.parametrize("block_type", BLOCK_TYPES)
    def test_default_data_is_dict(self, block_type):
        assert isinstance(default_data(block_type), dict)

    def test_default_unknown_is_empty(self):
        assert default_data("carousel-3d") == {}

    def test_default_keys_are_camel_case(self):
        assert "showAll" in default_data("staff-grid")
        assert "show_all" not in default_data("staff-grid")


class TestParse:

    def test_typed_view(self):
        d = parse_data(Block(id="a", type="heading", data={"text": "Halo", "level": 3}))
        assert isinstance(d, HeadingData)
        assert d.text == "Halo"
        assert d.level == 3

    def test_camel_case_payload(self):
        d = parse_data(Block(id="a", type="staff-grid", data={"showAll": True, "limit": 3}))
        assert isinstance(d, StaffGridData)
        assert d.show_all is True
        assert d.limit == 3

    def test_unknown_type_returns_none(self):
        assert parse_data(Block(id="a", type="nope", data={})) is None

    def test_invalid_payload_falls_back_to_defaults(self):
        d = parse_data(Block(id="a", type="staff-grid", data={"limit": "banyak"}))
        assert d.limit == StaffGridData().limit


class TestLoad:

    def test_skips_malformed_entries(self):
        raw = [{"id": "1", "type": "heading", "data": {}}, {"type": "paragraph"}, "junk", {"id": "2"}]
        blocks = load_blocks(raw)
        assert [b.id for b in blocks] == ["1"]

    def test_keeps_unknown_types(self):
        blocks = load_blocks([{"id": "1", "type": "retired-widget", "data": {"x": 1}}])
        assert blocks[0].type == "retired-widget"
        assert dump_blocks(blocks) == [{"id": "1", "type": "retired-widget", "data": {"x": 1}}]

    def test_non_list_is_empty(self):
        assert load_blocks(None) == []
        assert load_blocks({"id": "1"}) == []
