"""
Typed nodes produced by the markup parser.
"""
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class InlineKind(str, Enum):
    TEXT = "text"
    BOLD = "bold"
    MATH = "math"


class InlineSpan(BaseModel):
    """A delimiter-free run of text inside a block."""
    model_config = ConfigDict(frozen=True)

    kind: InlineKind
    content: str


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    RULE = "rule"
    BREAK = "break"


class BlockNode(BaseModel):
    """One line of generated text classified into a structural unit."""
    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    spans: Tuple[InlineSpan, ...] = ()
    level: Optional[int] = Field(default=None, ge=1, le=3, description="Heading level")
    ordered: Optional[bool] = Field(default=None, description="List item numbering")
    marker: Optional[str] = Field(default=None, description="Number of an ordered list item")

    @property
    def plain_text(self) -> str:
        return "".join(span.content for span in self.spans)
