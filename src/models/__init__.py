"""
Models package for notedeck

Contains data structures and type definitions for the deck pipeline.
"""

from .state import ProgramState, pipeline
from .cells import Cell, CellKind, CellError
from .commands import (
    Command,
    CommandSpec,
    COMMAND_SPECS,
    NewPage,
    StartAdding,
    StopAdding,
    Inject,
    WrapImage,
    SetClass,
)
from .deck import Deck, Page, DocumentState
from .parser import Annotation, BlockMatch, ImageReference

__all__ = [
    "ProgramState",
    "pipeline",
    "Cell",
    "CellKind",
    "CellError",
    "Command",
    "CommandSpec",
    "COMMAND_SPECS",
    "NewPage",
    "StartAdding",
    "StopAdding",
    "Inject",
    "WrapImage",
    "SetClass",
    "Deck",
    "Page",
    "DocumentState",
    "Annotation",
    "BlockMatch",
    "ImageReference",
]
