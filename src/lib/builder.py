"""
Page builder state machine

Applies commands and cell content to the deck, one document at a time.

States:
    Idle     no current page (DocumentState.current is None)
    HasPage  a current page exists; adding-mode is a sub-flag

The builder itself holds no per-document state. The caller creates a fresh
DocumentState for each document and passes it into every call, so the
"current page" can never refer to a page of an earlier document.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Type

from ..config import appsettings, AppSettings
from ..models.cells import Cell, CellKind
from ..models.commands import (
    Command,
    Inject,
    NewPage,
    SetClass,
    StartAdding,
    StopAdding,
    WrapImage,
)
from ..models.deck import Deck, DocumentState, Page
from ..models.parser import Annotation
from .errors import CrossDocumentReference, DeckError, NoActivePage
from .images import wrap_fill
from .log import LOG
from .tags import TagParser


Handler = Callable[[DocumentState, Command, Annotation], None]


def commands_schedule(commands: List[Command]) -> List[Command]:
    """
    Order a command sequence for execution

    A `class` followed later in the same sequence by a `new` is moved right
    after that `new`, so it labels the page the `new` creates. It stays
    pending across other commands (inject, start-add, ...) in between.
    Pending `class` commands keep their order, so the last one wins. A
    `class` with no later `new` stays where it is.

    Example:
        [SetClass("a"), Inject("x"), NewPage()] -> [Inject("x"), NewPage(), SetClass("a")]
    """
    scheduled: List[Command] = []
    pending: List[Command] = []

    for i, command in enumerate(commands):
        if isinstance(command, SetClass) and any(
            isinstance(later, NewPage) for later in commands[i + 1:]
        ):
            pending.append(command)
            continue
        scheduled.append(command)
        if isinstance(command, NewPage) and pending:
            scheduled.extend(pending)
            pending = []

    return scheduled


class PageBuilder:
    """
    Interprets commands and cells against a deck

    Responsibilities:
    - Create pages and track the current page per document
    - Toggle adding-mode and append verbatim cell content while it is on
    - Append code, stream output and error blocks of code cells
    - Annotate errors with the document path and cell index
    """

    def __init__(self, deck: Deck, settings: Optional[AppSettings] = None) -> None:
        self.deck = deck
        self.settings = settings or appsettings
        self.handlers: Dict[Type, Handler] = {
            NewPage: self.newPage_apply,
            StartAdding: self.startAdding_apply,
            StopAdding: self.stopAdding_apply,
            Inject: self.inject_apply,
            WrapImage: self.wrapImage_apply,
            SetClass: self.setClass_apply,
        }

    def document_begin(self, path: Optional[Path] = None) -> DocumentState:
        """Fresh Idle state for the next document; the deck keeps growing"""
        return DocumentState.state_begin(self.deck, path)

    def cell_process(self, state: DocumentState, cell: Cell) -> None:
        """
        Feed one cell through the state machine

        Markdown cells are parsed for an annotation block; code and raw cells
        only contribute content while adding-mode is on.

        Raises:
            DeckError: Any parse or semantic error, with path and cell context
        """
        try:
            if cell.kind is CellKind.MARKDOWN:
                self.markdown_process(state, cell)
            elif cell.kind is CellKind.CODE:
                if state.adding:
                    self.code_append(state, cell)
            elif state.adding:
                self.text_append(state, cell.source)
        except DeckError as e:
            raise e.context_add(state.path, cell.index)

    def markdown_process(self, state: DocumentState, cell: Cell) -> None:
        """
        Apply a markdown cell in reading order

        Text before the annotation block, the block's commands, then the text
        after it. Text is appended only if adding-mode is on when it is
        reached.
        """
        annotation = TagParser(cell.source, self.settings).annotation_extract()
        if annotation.found:
            LOG(f"Cell {cell.index}: {len(annotation.commands)} commands", level=3)

        if state.adding:
            self.text_append(state, annotation.leading)
        self.commands_apply(state, annotation.commands, annotation)
        if state.adding:
            self.text_append(state, annotation.trailing)

    def commands_apply(
        self, state: DocumentState, commands: List[Command], annotation: Optional[Annotation] = None
    ) -> None:
        """Apply a command sequence after scheduling class commands"""
        annotation = annotation or Annotation()
        for command in commands_schedule(commands):
            handler = self.handlers.get(type(command))
            if handler is None:
                raise TypeError(f"No handler for command {command!r}")
            handler(state, command, annotation)

    def page_current(self, state: DocumentState, operation: str) -> Page:
        """
        Resolve the current page of the document

        Raises:
            NoActivePage: The document has not created a page yet
            CrossDocumentReference: The index points before the document's
                                    first page
        """
        if state.current is None:
            raise NoActivePage(f"'{operation}' needs a page, but no 'new' was issued in this document")
        if state.current < state.first_page:
            raise CrossDocumentReference(
                f"'{operation}' resolved to page {state.current + 1}, "
                f"which belongs to an earlier document"
            )
        return self.deck.pages[state.current]

    def newPage_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        state.current = self.deck.page_append(Page(origin=state.path))
        state.adding = False
        LOG(f"Page {state.current + 1} created", level=3)

    def startAdding_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        self.page_current(state, "start-add")
        state.adding = True

    def stopAdding_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        state.adding = False

    def inject_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        self.page_current(state, "inject").fragment_append(command.content)

    def wrapImage_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        page = self.page_current(state, "wrap-image")
        page.fragment_append(wrap_fill(annotation.text, command.content))

    def setClass_apply(self, state: DocumentState, command: Command, annotation: Annotation) -> None:
        self.page_current(state, "class").label = command.content

    def text_append(self, state: DocumentState, text: str) -> None:
        """Append verbatim text without its surrounding blank lines"""
        text = text.strip("\r\n")
        if not text.strip():
            return
        self.page_current(state, "start-add").fragment_append(text)

    def code_append(self, state: DocumentState, cell: Cell) -> None:
        """Append the code block, then stream output, then error of a code cell"""
        page = self.page_current(state, "start-add")

        if cell.source.strip():
            page.fragment_append(f"```{cell.language}\n{cell.source.rstrip()}\n```")
        if self.settings.include_stream and cell.stream:
            page.fragment_append(f"```\n{cell.stream.rstrip()}\n```")
        if self.settings.include_error and cell.error is not None:
            page.fragment_append(f"```\n{cell.error.ename}: {cell.error.evalue}\n```")
