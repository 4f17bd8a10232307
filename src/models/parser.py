"""
Parser-specific data models

Type-safe structures for tag parser and image scanner return values.
"""

from dataclasses import dataclass, field
from typing import List

from .commands import Command


@dataclass
class BlockMatch:
    """
    Location of the annotation block inside a cell

    Attributes:
        start: Position of the opening token
        body_start: Position right after the opening token
        end: Position right after the closing token (set once scanned)

    Example:
        For "intro <!--deck new; --> outro" the block starts at 6,
        its body at 14 and it ends at 24.
    """
    start: int
    body_start: int
    end: int = -1


@dataclass
class Annotation:
    """
    Result of extracting the annotation block from one cell

    Attributes:
        commands: Commands in source order
        leading: Cell text before the block (whole text if there is no block)
        trailing: Cell text after the block
        found: Whether the cell had an annotation block

    Example:
        Input: "# Title\\n<!--deck new; start-add; -->\\nBody"
        Result: Annotation(
            commands=[NewPage(), StartAdding()],
            leading="# Title\\n",
            trailing="\\nBody",
            found=True
        )
    """
    commands: List[Command] = field(default_factory=list)
    leading: str = ""
    trailing: str = ""
    found: bool = False

    @property
    def text(self) -> str:
        """Cell text with the annotation block removed"""
        return self.leading + self.trailing


@dataclass
class ImageReference:
    """
    An image path found in markdown text

    Attributes:
        path: Path exactly as written
        start: Position of the first path character
        end: Position right after the last path character
    """
    path: str
    start: int
    end: int
