"""
Deck, page and per-document state models

The Deck is the only shared mutable structure of a run. DocumentState is
created fresh for every document and discarded when the document ends.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Page:
    """
    One slide

    Attributes:
        fragments: Content fragments in the order they were appended
        label: Class label (last write wins), None when unset
        origin: Path of the document that created the page
    """
    fragments: List[str] = field(default_factory=list)
    label: Optional[str] = None
    origin: Optional[Path] = None

    def fragment_append(self, text: str) -> None:
        self.fragments.append(text)


@dataclass
class Deck:
    """
    Ordered page sequence produced by one run

    Attributes:
        preamble: Raw fragments written before the first page
        pages: Append-only page list, in document visitation order
    """
    preamble: List[str] = field(default_factory=list)
    pages: List[Page] = field(default_factory=list)

    def page_append(self, page: Page) -> int:
        """Append a page and return its index"""
        self.pages.append(page)
        return len(self.pages) - 1

    def preamble_append(self, text: str) -> None:
        self.preamble.append(text)

    def __len__(self) -> int:
        return len(self.pages)


@dataclass
class DocumentState:
    """
    Page-builder state local to one document

    Attributes:
        path: Document being processed
        first_page: Deck length when the document started; pages below this
                    index belong to earlier documents
        current: Index of the current page, None before the first `new`
        adding: Adding-mode flag
    """
    path: Optional[Path] = None
    first_page: int = 0
    current: Optional[int] = None
    adding: bool = False

    @classmethod
    def state_begin(cls, deck: Deck, path: Optional[Path] = None) -> "DocumentState":
        """Create the Idle state for a document about to be processed"""
        return cls(path=path, first_page=len(deck))
