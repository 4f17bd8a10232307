"""
notedeck - Notebook to slide-deck compiler

Builds one presentation from annotated notebooks.
"""

__version__ = "1.0.0"

from .tags import TagParser
from .builder import PageBuilder, commands_schedule
from .walker import PathWalker
from .assembler import DeckAssembler, deck_build
from .renderer import DeckRenderer
from .source import NotebookSource
from .errors import (
    DeckError,
    UnknownCommand,
    MalformedCommand,
    ImageWrapError,
    NoActivePage,
    CrossDocumentReference,
    DocumentReadError,
    PathNotFound,
    OutputExists,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "TagParser",
    "PageBuilder",
    "commands_schedule",
    "PathWalker",
    "DeckAssembler",
    "deck_build",
    "DeckRenderer",
    "NotebookSource",
    "DeckError",
    "UnknownCommand",
    "MalformedCommand",
    "ImageWrapError",
    "NoActivePage",
    "CrossDocumentReference",
    "DocumentReadError",
    "PathNotFound",
    "OutputExists",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
