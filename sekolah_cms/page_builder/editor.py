"""
Block sequence editing.
Pure functions: each takes a list of Blocks and returns a new list; the input
list and its blocks are never mutated. An unknown id is a no-op.
"""
import copy
import uuid
from typing import Any, Dict, List, Optional, Set

from .blocks import Block, default_data

BlockList = List[Block]


def _fresh_id(taken: Set[str]) -> str:
    while True:
        bid = uuid.uuid4().hex[:10]
        if bid not in taken:
            return bid


def new_block_id(existing: Optional[BlockList] = None) -> str:
    return _fresh_id(_tree_ids(existing or []))


def _cell_entries(block_type: str, data: Any) -> List[Dict[str, Any]]:
    """Nested block dicts held in a columns payload."""
    if block_type != "columns" or not isinstance(data, dict) or not isinstance(data.get("cells"), list):
        return []
    return [e for cell in data["cells"] if isinstance(cell, list) for e in cell if isinstance(e, dict)]


def _collect_ids(block_type: str, data: Any, out: Set[str]):
    for entry in _cell_entries(block_type, data):
        if entry.get("id"):
            out.add(entry["id"])
        _collect_ids(entry.get("type", ""), entry.get("data"), out)


def _tree_ids(blocks: BlockList) -> Set[str]:
    ids: Set[str] = set()
    for b in blocks:
        ids.add(b.id)
        _collect_ids(b.type, b.data, ids)
    return ids


def _reassign_ids(block_type: str, data: Any, taken: Set[str]):
    for entry in _cell_entries(block_type, data):
        entry["id"] = _fresh_id(taken)
        taken.add(entry["id"])
        _reassign_ids(entry.get("type", ""), entry.get("data"), taken)


def _index_of(blocks: BlockList, block_id: str) -> int:
    for i, b in enumerate(blocks):
        if b.id == block_id:
            return i
    return -1


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


def insert(blocks: BlockList, block_type: str, index: Optional[int] = None) -> BlockList:
    """New block of `block_type` with its default payload, spliced at `index` (end if None)."""
    block = Block(id=new_block_id(blocks), type=block_type, data=default_data(block_type))
    pos = len(blocks) if index is None else _clamp(index, len(blocks))
    return [*blocks[:pos], block, *blocks[pos:]]


def remove(blocks: BlockList, block_id: str) -> BlockList:
    return [b for b in blocks if b.id != block_id]


def duplicate(blocks: BlockList, block_id: str) -> BlockList:
    """Deep copy of the block placed right after the source. The copy and every
    block nested in its column cells get fresh ids."""
    i = _index_of(blocks, block_id)
    if i == -1:
        return list(blocks)
    src = blocks[i]
    taken = _tree_ids(blocks)
    data = copy.deepcopy(src.data)
    _reassign_ids(src.type, data, taken)
    clone = Block(id=_fresh_id(taken), type=src.type, data=data)
    return [*blocks[:i + 1], clone, *blocks[i + 1:]]


def reorder(blocks: BlockList, block_id: str, new_index: int) -> BlockList:
    """Move one block to `new_index`; the others keep their relative order."""
    i = _index_of(blocks, block_id)
    if i == -1:
        return list(blocks)
    rest = [b for b in blocks if b.id != block_id]
    pos = _clamp(new_index, len(rest))
    return [*rest[:pos], blocks[i], *rest[pos:]]


def move_up(blocks: BlockList, block_id: str) -> BlockList:
    i = _index_of(blocks, block_id)
    if i <= 0:
        return list(blocks)
    return reorder(blocks, block_id, i - 1)


def move_down(blocks: BlockList, block_id: str) -> BlockList:
    i = _index_of(blocks, block_id)
    if i == -1 or i >= len(blocks) - 1:
        return list(blocks)
    return reorder(blocks, block_id, i + 1)


def update_data(blocks: BlockList, block_id: str, partial: Dict[str, Any]) -> BlockList:
    """Shallow-merge `partial` into the block payload; id and type are kept."""
    return [
        Block(id=b.id, type=b.type, data={**b.data, **partial}) if b.id == block_id else b
        for b in blocks
    ]


def change_type(blocks: BlockList, block_id: str, block_type: str) -> BlockList:
    """Switch a block to another type. The payload is reset to that type's defaults."""
    return [
        Block(id=b.id, type=block_type, data=default_data(block_type)) if b.id == block_id else b
        for b in blocks
    ]


# ── Batch application (used by the preview endpoint) ───────────────────────────

_OPS = {
    "insert":      lambda bl, op: insert(bl, op["type"], op.get("index")),
    "remove":      lambda bl, op: remove(bl, op["id"]),
    "duplicate":   lambda bl, op: duplicate(bl, op["id"]),
    "reorder":     lambda bl, op: reorder(bl, op["id"], int(op["index"])),
    "move_up":     lambda bl, op: move_up(bl, op["id"]),
    "move_down":   lambda bl, op: move_down(bl, op["id"]),
    "update_data": lambda bl, op: update_data(bl, op["id"], op.get("data") or {}),
    "change_type": lambda bl, op: change_type(bl, op["id"], op["type"]),
}


def apply_ops(blocks: BlockList, ops: List[Dict[str, Any]]) -> BlockList:
    """Apply a list of {"op": name, ...} operations in order. Unknown ops raise ValueError."""
    for op in ops:
        fn = _OPS.get(op.get("op", ""))
        if fn is None:
            raise ValueError(f"Unknown editor operation: {op.get('op')!r}")
        blocks = fn(blocks, op)
    return blocks
