"""
Deck renderer

Serializes a Deck into remark-style markdown:

    <front matter>

    <preamble fragments>

    ---

    class: topic

    <page fragments>

Pure formatting: the same deck always renders to the same text.
"""

from typing import List, Optional

from ..config import appsettings, AppSettings
from ..models.deck import Deck, Page


class DeckRenderer:
    """Formats a deck with the configured delimiter and class marker"""

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self.settings = settings or appsettings

    def head_render(self, deck: Deck) -> str:
        """Front matter followed by the preamble fragments"""
        blocks = [self.settings.front_matter.strip("\n")] + deck.preamble
        return "\n\n".join(block for block in blocks if block)

    def page_render(self, page: Page) -> str:
        """Class marker line (if any) followed by the page fragments"""
        blocks: List[str] = []
        if page.label:
            blocks.append(self.settings.classMarker_make(page.label))
        blocks.extend(fragment for fragment in page.fragments if fragment)
        return "\n\n".join(blocks)

    def render(self, deck: Deck) -> str:
        """
        Render the whole deck

        The head and every page are joined by the page delimiter; the output
        ends with exactly one newline.
        """
        sections = []
        head = self.head_render(deck)
        if head:
            sections.append(head)
        sections.extend(self.page_render(page) for page in deck.pages)
        return self.settings.page_delimiter.join(sections).rstrip("\n") + "\n"
