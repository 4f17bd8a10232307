"""
Notebook cell models

Immutable views of the cells read from a notebook document.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class CellKind(Enum):
    """Kinds of notebook cells the page builder understands"""
    MARKDOWN = "markdown"
    CODE = "code"
    RAW = "raw"


@dataclass(frozen=True)
class CellError:
    """
    Captured error output of a code cell

    Attributes:
        ename: Error kind (e.g. "ZeroDivisionError")
        evalue: Error message
    """
    ename: str
    evalue: str


@dataclass(frozen=True)
class Cell:
    """
    One unit of document content

    Attributes:
        kind: Cell kind
        source: Raw markdown text or code source
        index: Zero-based position of the cell in its notebook
        stream: Captured stream output of a code cell, if any
        error: Captured error of a code cell, if any
        language: Code fence language for code cells
    """
    kind: CellKind
    source: str
    index: int = 0
    stream: Optional[str] = None
    error: Optional[CellError] = None
    language: str = ""
