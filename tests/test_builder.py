"""
Page builder tests - the per-document state machine

Tests page creation, adding-mode, injection, image wrapping, class
scheduling, code cell output and isolation between documents.
"""

from pathlib import Path

import pytest

from notedeck.config import AppSettings
from notedeck.lib.builder import PageBuilder, commands_schedule
from notedeck.lib.errors import (
    CrossDocumentReference,
    ImageWrapError,
    MalformedCommand,
    NoActivePage,
    UnknownCommand,
)
from notedeck.models.cells import Cell, CellError, CellKind
from notedeck.models.commands import Inject, NewPage, SetClass, StartAdding
from notedeck.models.deck import Deck, DocumentState


def md(source: str, index: int = 0) -> Cell:
    return Cell(kind=CellKind.MARKDOWN, source=source, index=index)


def cells_run(builder: PageBuilder, sources, path=None) -> DocumentState:
    """Run markdown sources as one document and return its final state"""
    state = builder.document_begin(path)
    for index, source in enumerate(sources):
        builder.cell_process(state, md(source, index))
    return state


@pytest.fixture
def deck() -> Deck:
    return Deck()


@pytest.fixture
def builder(deck) -> PageBuilder:
    return PageBuilder(deck)


class TestPages:
    """new and the Idle/HasPage states"""

    def test_new_creates_pages(self, builder, deck):
        """Each new appends a page and makes it current"""
        state = cells_run(builder, ["<!--deck new; -->", "<!--deck new; -->"])

        assert len(deck.pages) == 2
        assert state.current == 1

    def test_document_starts_idle(self, builder):
        """A fresh document has no current page and adding-mode off"""
        state = builder.document_begin()

        assert state.current is None
        assert state.adding is False

    def test_start_add_without_page(self, builder):
        """start-add before any new fails"""
        with pytest.raises(NoActivePage):
            cells_run(builder, ["<!--deck start-add; -->"])

    def test_inject_without_page(self, builder):
        """inject before any new fails"""
        with pytest.raises(NoActivePage):
            cells_run(builder, ["<!--deck inject[x]; -->"])

    def test_class_without_page_or_new(self, builder):
        """class with no current page and no following new fails"""
        with pytest.raises(NoActivePage):
            cells_run(builder, ["<!--deck class[x]; -->"])

    def test_parse_errors_propagate(self, builder):
        """Tag parser errors surface through the builder"""
        with pytest.raises(UnknownCommand):
            cells_run(builder, ["<!--deck nope; -->"])
        with pytest.raises(MalformedCommand):
            cells_run(builder, ["<!--deck new"])

    def test_error_has_cell_and_path(self, builder):
        """Errors carry the document path and cell index"""
        with pytest.raises(NoActivePage) as excinfo:
            cells_run(builder, ["intro", "<!--deck inject[x]; -->"], path=Path("talk.ipynb"))

        assert excinfo.value.cell == 1
        assert excinfo.value.path == Path("talk.ipynb")
        assert "cell 1 in talk.ipynb" in str(excinfo.value)


class TestAddingMode:
    """start-add / stop-add and verbatim cell text"""

    def test_trailing_text_added(self, builder, deck):
        """Text after the block is added once adding-mode is on"""
        cells_run(builder, ["<!--deck new; start-add; -->\n# Title\nBody"])

        assert deck.pages[0].fragments == ["# Title\nBody"]

    def test_following_cells_added(self, builder, deck):
        """Adding-mode stays on across cells"""
        cells_run(builder, ["<!--deck new; start-add; -->", "First", "Second"])

        assert deck.pages[0].fragments == ["First", "Second"]

    def test_text_before_stop_add(self, builder, deck):
        """Text before the block is added, text after stop-add is not"""
        cells_run(builder, [
            "<!--deck new; start-add; -->",
            "Intro\n<!--deck stop-add; -->\nHidden",
            "Also hidden",
        ])

        assert deck.pages[0].fragments == ["Intro"]

    def test_stop_add_when_off_is_noop(self, builder, deck):
        """stop-add without start-add is tolerated"""
        state = cells_run(builder, ["<!--deck new; stop-add; stop-add; -->"])

        assert state.adding is False
        assert len(deck.pages) == 1

    def test_new_resets_adding(self, builder, deck):
        """A new page starts with adding-mode off"""
        state = cells_run(builder, ["<!--deck new; start-add; -->A", "<!--deck new; -->B"])

        assert deck.pages[0].fragments == ["A"]
        assert deck.pages[1].fragments == []
        assert state.adding is False

    def test_blank_text_skipped(self, builder, deck):
        """Whitespace-only text adds nothing"""
        cells_run(builder, ["<!--deck new; start-add; -->\n\n", "   \n"])

        assert deck.pages[0].fragments == []

    def test_raw_cell_not_parsed(self, builder, deck):
        """Raw cells are copied verbatim while adding, never parsed"""
        state = cells_run(builder, ["<!--deck new; start-add; -->"])
        builder.cell_process(state, Cell(kind=CellKind.RAW, source="<!--deck nope; -->", index=1))

        assert deck.pages[0].fragments == ["<!--deck nope; -->"]


class TestInjectAndWrap:
    """inject and wrap-image"""

    def test_inject_regardless_of_adding(self, builder, deck):
        """inject appends even with adding-mode off"""
        cells_run(builder, ["<!--deck new; inject[## Agenda]; -->ignored"])

        assert deck.pages[0].fragments == ["## Agenda"]

    def test_wrap_image(self, builder, deck):
        """Images of the cell are filled into the template"""
        source = '<!--deck new; wrap-image[<img src="{}" width="50%">]; -->\n![pic](./a.png)'
        cells_run(builder, [source])

        assert deck.pages[0].fragments == ['<img src="./a.png" width="50%">']

    def test_wrap_image_two_references(self, builder, deck):
        """Markdown and HTML images are collected in order"""
        source = (
            "<!--deck new; wrap-image[![]({1}) ![]({0})]; -->\n"
            "<img src='first.png'>\n![x](second.png)"
        )
        cells_run(builder, [source])

        assert deck.pages[0].fragments == ["![](second.png) ![](first.png)"]

    def test_wrap_image_without_images(self, builder):
        """A placeholder with no image to fill is an error"""
        with pytest.raises(ImageWrapError):
            cells_run(builder, ["<!--deck new; wrap-image[![]({})]; -->"])

    def test_wrap_image_needs_page(self, builder):
        """wrap-image before new fails"""
        with pytest.raises(NoActivePage):
            cells_run(builder, ["<!--deck wrap-image[x]; -->\n![](a.png)"])


class TestClassScheduling:
    """class buffering up to the next new"""

    def test_schedule_moves_class_after_new(self):
        """class followed by new is applied right after the new"""
        assert commands_schedule([SetClass("a"), NewPage()]) == [NewPage(), SetClass("a")]

    def test_schedule_survives_inject(self):
        """Intervening commands do not cancel the pending class"""
        commands = [SetClass("a"), Inject("x"), StartAdding(), NewPage()]
        assert commands_schedule(commands) == [Inject("x"), StartAdding(), NewPage(), SetClass("a")]

    def test_schedule_without_new(self):
        """class with no later new keeps its position"""
        commands = [NewPage(), SetClass("a"), Inject("x")]
        assert commands_schedule(commands) == commands

    def test_class_then_new_labels_new_page(self, builder, deck):
        """class directly before new targets the newly created page"""
        cells_run(builder, ["<!--deck new; -->", "<!--deck class[topic]; new; -->"])

        assert deck.pages[0].label is None
        assert deck.pages[1].label == "topic"

    def test_class_pending_across_inject(self, builder, deck):
        """inject between class and new still goes to the old page"""
        cells_run(builder, ["<!--deck new; -->", "<!--deck class[x]; inject[hi]; new; -->"])

        assert deck.pages[0].fragments == ["hi"]
        assert deck.pages[0].label is None
        assert deck.pages[1].label == "x"

    def test_class_after_new_labels_current(self, builder, deck):
        """class without a later new labels the current page"""
        cells_run(builder, ["<!--deck new; class[a]; -->"])

        assert deck.pages[0].label == "a"

    def test_class_last_write_wins(self, builder, deck):
        """Later class commands overwrite the label of the same page"""
        cells_run(builder, ["<!--deck class[a]; class[b]; new; -->"])
        assert deck.pages[0].label == "b"

    def test_class_overwritten_by_later_cell(self, builder, deck):
        """A later cell may relabel the current page"""
        cells_run(builder, ["<!--deck class[a]; new; -->", "<!--deck class[c]; -->"])
        assert deck.pages[0].label == "c"


class TestCodeCells:
    """Code, stream output and error blocks"""

    code = Cell(
        kind=CellKind.CODE,
        source="print('hi')\n1 / 0\n",
        index=1,
        stream="hi\n",
        error=CellError(ename="ZeroDivisionError", evalue="division by zero"),
        language="python",
    )

    def test_code_stream_error_order(self, builder, deck):
        """Code block, then stream, then error"""
        state = cells_run(builder, ["<!--deck new; start-add; -->"])
        builder.cell_process(state, self.code)

        assert deck.pages[0].fragments == [
            "```python\nprint('hi')\n1 / 0\n```",
            "```\nhi\n```",
            "```\nZeroDivisionError: division by zero\n```",
        ]

    def test_code_ignored_when_not_adding(self, builder, deck):
        """Code cells contribute nothing with adding-mode off"""
        state = cells_run(builder, ["<!--deck new; -->"])
        builder.cell_process(state, self.code)

        assert deck.pages[0].fragments == []

    def test_output_toggles(self, deck):
        """Stream and error blocks follow the settings"""
        builder = PageBuilder(deck, AppSettings(include_stream=False, include_error=False))
        state = cells_run(builder, ["<!--deck new; start-add; -->"])
        builder.cell_process(state, self.code)

        assert deck.pages[0].fragments == ["```python\nprint('hi')\n1 / 0\n```"]


class TestDocumentIsolation:
    """State never crosses a document boundary"""

    def test_two_documents(self, builder, deck):
        """A creates two pages, B one; B cannot reach A's pages"""
        state_a = cells_run(builder, ["<!--deck new; start-add; -->", "<!--deck new; -->A2"],
                            path=Path("a.ipynb"))
        assert state_a.current == 1

        state_b = builder.document_begin(Path("b.ipynb"))
        assert state_b.current is None
        assert state_b.adding is False
        assert state_b.first_page == 2

        with pytest.raises(NoActivePage):
            builder.cell_process(state_b, md("<!--deck inject[leak]; -->"))

        builder.cell_process(state_b, md("<!--deck new; inject[b]; -->", 1))

        assert len(deck.pages) == 3
        assert [page.origin for page in deck.pages] == [
            Path("a.ipynb"), Path("a.ipynb"), Path("b.ipynb")
        ]
        assert deck.pages[1].fragments == []
        assert deck.pages[2].fragments == ["b"]

    def test_adding_mode_not_carried(self, builder, deck):
        """Adding-mode left on in A is off in B"""
        cells_run(builder, ["<!--deck new; start-add; -->"])
        cells_run(builder, ["text of B"])

        assert deck.pages[0].fragments == []

    def test_cross_document_guard(self, builder, deck):
        """A state pointing before its first page is rejected"""
        cells_run(builder, ["<!--deck new; new; -->"])
        state = DocumentState(first_page=2, current=0)

        with pytest.raises(CrossDocumentReference):
            builder.page_current(state, "inject")
