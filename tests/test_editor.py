"""
Tests block sequence editing: ids, purity, permutations, batch ops.
"""
import random

import pytest

from sekolah_cms.page_builder import editor
from sekolah_cms.page_builder.blocks import Block, default_data
from sekolah_cms.page_builder.renderer.html import render_blocks


def _seq(*types):
    return [Block(id=f"b{i}", type=t, data=default_data(t)) for i, t in enumerate(types)]


def _all_ids(blocks):
    """Top-level and nested cell ids, nested ones read from raw dicts."""
    out = []

    def walk(entries):
        for e in entries:
            out.append(e["id"])
            if e["type"] == "columns":
                for cell in e["data"].get("cells", []):
                    walk(cell)

    walk([b.model_dump() for b in blocks])
    return out


class TestInsert:

    def test_appends_with_defaults(self):
        blocks = editor.insert(_seq("heading"), "staff-grid")
        assert [b.type for b in blocks] == ["heading", "staff-grid"]
        assert blocks[1].data == default_data("staff-grid")

    def test_splices_at_index(self):
        blocks = editor.insert(_seq("heading", "paragraph"), "divider", 1)
        assert [b.type for b in blocks] == ["heading", "divider", "paragraph"]

    def test_index_clamped(self):
        blocks = editor.insert(_seq("heading"), "divider", 99)
        assert blocks[-1].type == "divider"

    def test_ids_unique(self):
        blocks = []
        for _ in range(50):
            blocks = editor.insert(blocks, "paragraph")
        assert len({b.id for b in blocks}) == 50

    def test_input_not_mutated(self):
        original = _seq("heading")
        editor.insert(original, "paragraph")
        assert len(original) == 1


class TestDuplicate:

    def test_copy_gets_new_id_and_follows_source(self):
        blocks = editor.duplicate(_seq("heading", "paragraph"), "b0")
        assert [b.type for b in blocks] == ["heading", "heading", "paragraph"]
        assert blocks[1].id not in ("b0", "b1")
        assert blocks[1].data == blocks[0].data

    def test_copy_is_deep(self):
        src = [Block(id="x", type="list", data={"items": ["a"]})]
        blocks = editor.duplicate(src, "x")
        blocks[1].data["items"].append("b")
        assert src[0].data["items"] == ["a"]

    def test_nested_cell_blocks_get_fresh_ids(self):
        cells = [[{"id": "inner1", "type": "paragraph", "data": {"text": "Kiri"}}],
                 [{"id": "inner2", "type": "columns", "data": {"columns": 1, "cells": [
                     [{"id": "deep", "type": "heading", "data": {"text": "Dalam"}}]]}}]]
        src = [Block(id="col", type="columns", data={"columns": 2, "gap": "md", "cells": cells})]
        blocks = editor.duplicate(src, "col")

        ids = _all_ids(blocks)
        assert len(ids) == len(set(ids)) == 8
        copy_cells = blocks[1].data["cells"]
        assert copy_cells[0][0]["id"] not in ("inner1", "inner2", "deep")
        assert copy_cells[0][0]["data"] == {"text": "Kiri"}
        assert src[0].data["cells"][0][0]["id"] == "inner1"

        html = render_blocks(blocks)
        assert html.count('id="block-inner1"') == 1

    def test_unknown_id_noop(self):
        blocks = _seq("heading")
        assert editor.duplicate(blocks, "zzz") == blocks


class TestReorder:

    def test_result_is_permutation(self):
        blocks = _seq("heading", "paragraph", "image", "divider")
        moved = editor.reorder(blocks, "b0", 2)
        assert sorted(b.id for b in moved) == sorted(b.id for b in blocks)
        assert [b.id for b in moved] == ["b1", "b2", "b0", "b3"]

    def test_move_up_at_top_noop(self):
        blocks = _seq("heading", "paragraph")
        assert [b.id for b in editor.move_up(blocks, "b0")] == ["b0", "b1"]

    def test_move_down(self):
        blocks = _seq("heading", "paragraph")
        assert [b.id for b in editor.move_down(blocks, "b0")] == ["b1", "b0"]

    def test_move_down_at_bottom_noop(self):
        blocks = _seq("heading", "paragraph")
        assert [b.id for b in editor.move_down(blocks, "b1")] == ["b0", "b1"]


class TestUpdate:

    def test_update_merges_payload(self):
        blocks = editor.update_data(_seq("heading"), "b0", {"text": "Visi"})
        assert blocks[0].data["text"] == "Visi"
        assert blocks[0].data["level"] == default_data("heading")["level"]

    def test_change_type_resets_payload(self):
        blocks = editor.update_data(_seq("heading"), "b0", {"text": "Visi"})
        blocks = editor.change_type(blocks, "b0", "paragraph")
        assert blocks[0].id == "b0"
        assert blocks[0].type == "paragraph"
        assert blocks[0].data == default_data("paragraph")

    def test_remove(self):
        assert [b.id for b in editor.remove(_seq("heading", "paragraph"), "b0")] == ["b1"]


class TestApplyOps:

    def test_sequence(self):
        blocks = editor.apply_ops([], [
            {"op": "insert", "type": "heading"},
            {"op": "insert", "type": "paragraph"},
        ])
        first = blocks[0].id
        blocks = editor.apply_ops(blocks, [
            {"op": "update_data", "id": first, "data": {"text": "Profil"}},
            {"op": "move_down", "id": first},
        ])
        assert [b.type for b in blocks] == ["paragraph", "heading"]
        assert blocks[1].data["text"] == "Profil"

    def test_unknown_op_raises(self):
        with pytest.raises(ValueError):
            editor.apply_ops([], [{"op": "explode"}])


class TestRandomSequences:

    TYPES = ["heading", "paragraph", "columns", "image", "staff-grid", "divider"]

    def _step(self, rng, blocks):
        ids = [b.id for b in blocks]
        op = rng.choice(["insert", "remove", "duplicate", "reorder", "move_up", "move_down",
                         "update_data", "change_type", "nest"])
        target = rng.choice(ids) if ids else "missing"
        if op == "insert":
            return op, editor.insert(blocks, rng.choice(self.TYPES), rng.randint(-2, len(blocks) + 2))
        if op == "remove":
            return op, editor.remove(blocks, target)
        if op == "duplicate":
            return op, editor.duplicate(blocks, target)
        if op == "reorder":
            return op, editor.reorder(blocks, target, rng.randint(-2, len(blocks) + 2))
        if op == "move_up":
            return op, editor.move_up(blocks, target)
        if op == "move_down":
            return op, editor.move_down(blocks, target)
        if op == "change_type":
            return op, editor.change_type(blocks, target, rng.choice(self.TYPES))
        if op == "nest":
            # copy an existing block into the first cell of a columns block
            cols = [b for b in blocks if b.type == "columns"]
            if not cols or not ids:
                return op, blocks
            inner = editor.duplicate(blocks, target)
            fresh = next(b for b in inner if b.id not in ids)
            nested = editor.update_data(inner, cols[0].id, {"cells": [[fresh.model_dump()]]})
            return op, editor.remove(nested, fresh.id)
        return op, editor.update_data(blocks, target, {"text": f"t{rng.random()}"})

    @pytest.mark.parametrize("seed", range(20))
    def test_ids_stay_unique_and_moves_permute(self, seed):
        rng = random.Random(seed)
        blocks = []
        for _ in range(60):
            before = [b.id for b in blocks]
            op, blocks = self._step(rng, blocks)
            ids = _all_ids(blocks)
            assert len(ids) == len(set(ids)), (seed, op)
            if op in ("reorder", "move_up", "move_down", "update_data", "change_type"):
                assert sorted(b.id for b in blocks) == sorted(before), (seed, op)
