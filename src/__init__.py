"""
notedeck - Notebook to slide-deck compiler

Turns annotated Jupyter notebooks into a single remark-style slide deck, so a
notebook and its presentation are authored once and kept in sync.
"""

__version__ = "1.0.0"

from .lib import TagParser, PageBuilder, DeckAssembler, DeckRenderer, LOG, state_connectToLogger

__all__ = [
    "TagParser",
    "PageBuilder",
    "DeckAssembler",
    "DeckRenderer",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
