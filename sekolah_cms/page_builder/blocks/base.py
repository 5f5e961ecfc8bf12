"""
Base block types.
A Block is {id, type, data}; each type owns a BlockData model that gives the
default payload and a typed view over the stored JSON.
"""
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BlockData(BaseModel):
    """Typed payload of a block. Keys are stored camelCase in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    block_type: ClassVar[str] = ""

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Block(BaseModel):
    """One unit of page content. `type` is kept as a plain string so that
    documents holding unknown or retired types still load."""
    id: str
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
