from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BlockKind(str, Enum):
    TITLE = "title"
    SECTION_HEADER = "section_header"
    PARAGRAPH = "paragraph"
    LINE = "line"


@dataclass(frozen=True)
class ContentBlock:
    kind: BlockKind
    text: str
    # Blank space left below the block, in line-height units.
    space_after: float = 0.0

    @classmethod
    def title(cls, text: str) -> "ContentBlock":
        return cls(BlockKind.TITLE, text)

    @classmethod
    def header(cls, text: str) -> "ContentBlock":
        return cls(BlockKind.SECTION_HEADER, text)

    @classmethod
    def paragraph(cls, text: str, space_after: float = 0.0) -> "ContentBlock":
        return cls(BlockKind.PARAGRAPH, text, space_after)

    @classmethod
    def line(cls, text: str, space_after: float = 0.0) -> "ContentBlock":
        return cls(BlockKind.LINE, text, space_after)
