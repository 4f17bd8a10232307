"""
Deck assembler

Drives the whole run: PathWalker -> NotebookSource -> TagParser ->
PageBuilder, strictly one path, one cell and one command at a time.

Documents each get a fresh DocumentState. Other files are injected verbatim:
into the preamble while the deck has no page yet, otherwise appended to the
last page of the deck. Any error aborts the run; nothing partial is returned.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..config import appsettings, AppSettings
from ..models.deck import Deck, DocumentState
from .builder import PageBuilder
from .errors import DeckError, DocumentReadError
from .images import paths_relocate
from .log import LOG
from .source import NotebookSource
from .walker import PathWalker


class DeckAssembler:
    """
    Builds a Deck from input roots

    Attributes:
        output_path: Output file, used to relocate relative image paths
                     (None disables relocation)
        settings: Application settings
        deck: Deck being assembled
    """

    def __init__(
        self, output_path: Optional[Path] = None, settings: Optional[AppSettings] = None
    ) -> None:
        self.output_path = Path(output_path) if output_path is not None else None
        self.settings = settings or appsettings
        self.deck = Deck()
        self.builder = PageBuilder(self.deck, self.settings)

    def assemble(self, roots: Sequence[Union[str, Path]]) -> Deck:
        """
        Walk the roots and build the deck from every resulting path

        Returns:
            The assembled Deck

        Raises:
            DeckError: First parse, semantic or input error encountered
        """
        paths = PathWalker(roots, self.settings).walk()
        return self.paths_assemble(paths)

    def paths_assemble(self, paths: List[Path]) -> Deck:
        """Build the deck from already walked concrete paths"""
        for path in paths:
            if path.suffix == self.settings.document_suffix:
                self.document_process(path)
            else:
                self.raw_inject(path)

        LOG(f"Assembled {len(self.deck)} pages from {len(paths)} paths", level=2)
        return self.deck

    def document_process(self, path: Path) -> DocumentState:
        """
        Process one notebook with its own, fresh document state

        Returns:
            The document's final state (for inspection; it is not reused)
        """
        LOG(f"Processing notebook {path}", level=2)
        cells = NotebookSource(path, self.settings).cells_read()

        state = self.builder.document_begin(path)
        for cell in cells:
            self.builder.cell_process(state, cell)

        if self.output_path is not None and self.settings.relocate_images:
            self.images_relocate(state, path, self.output_path)

        LOG(f"{path.name}: {len(self.deck) - state.first_page} pages", level=2)
        return state

    def images_relocate(self, state: DocumentState, path: Path, output_path: Path) -> None:
        """Relocate image paths in the pages created by this document"""
        for page in self.deck.pages[state.first_page:]:
            page.fragments = [
                paths_relocate(fragment, output_path, path) for fragment in page.fragments
            ]

    def raw_inject(self, path: Path) -> None:
        """Inject a non-notebook file verbatim as preamble or page fragment"""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Unable to read file: {e}", path=path)

        text = text.strip("\r\n")
        if not self.deck.pages:
            LOG(f"Injecting {path} into the preamble", level=2)
            self.deck.preamble_append(text)
        else:
            LOG(f"Injecting {path} into page {len(self.deck)}", level=2)
            self.deck.pages[-1].fragment_append(text)


def deck_build(
    roots: Sequence[Union[str, Path]],
    output_path: Optional[Path] = None,
    settings: Optional[AppSettings] = None,
) -> Deck:
    """
    Convenience wrapper: assemble a fresh deck from roots

    Example:
        >>> deck = deck_build(["title.rmd", "notebooks/"], Path("out/deck.rmd"))
        >>> len(deck.pages)
        12
    """
    try:
        return DeckAssembler(output_path, settings).assemble(roots)
    except DeckError:
        LOG("Deck assembly aborted", level=2)
        raise
