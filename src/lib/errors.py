"""
Error kinds raised while building a deck.

Every error is terminal for the run. Errors raised deep in the tag parser or
page builder are annotated on the way out with the document path and the
cell index so an author can find the offending annotation.
"""

from pathlib import Path
from typing import Optional


class DeckError(Exception):
    """Base class for all notedeck errors"""

    def __init__(
        self, message: str, path: Optional[Path] = None, cell: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cell = cell

    def context_add(
        self, path: Optional[Path] = None, cell: Optional[int] = None
    ) -> "DeckError":
        """Fill in missing source context; existing context is kept"""
        if self.path is None:
            self.path = path
        if self.cell is None:
            self.cell = cell
        return self

    def __str__(self) -> str:
        where = []
        if self.cell is not None:
            where.append(f"cell {self.cell}")
        if self.path is not None:
            where.append(f"in {self.path}")
        if not where:
            return self.message
        return f"{self.message} <{' '.join(where)}>"


class UnknownCommand(DeckError):
    """Raised for an unrecognized statement name"""
    pass


class MalformedCommand(DeckError):
    """Raised for an unterminated bracket, statement or annotation block"""
    pass


class ImageWrapError(MalformedCommand):
    """Raised when a wrap-image template cannot be filled"""
    pass


class NoActivePage(DeckError):
    """Raised when a page operation is issued with no current page"""
    pass


class CrossDocumentReference(DeckError):
    """Raised if a command resolves to a page of another document"""
    pass


class DocumentReadError(DeckError):
    """Raised when a notebook cannot be read or decoded"""
    pass


class PathNotFound(DeckError):
    """Raised when an input root does not exist"""
    pass


class OutputExists(DeckError):
    """Raised when the output exists and overwriting was not forced"""
    pass
