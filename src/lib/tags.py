"""
Parser for annotation blocks in markdown cells

Extracts the command sequence embedded in a cell's raw text.

A cell carries at most one annotation block, delimited by the configured
opening and closing tokens (``<!--deck`` and ``-->`` by default). Inside the
block, statements are terminated by ``;``:

    <!--deck new; class[center, middle]; inject[# Agenda]; start-add; -->

Key features:
- Single left-to-right pass driven by an explicit scanner state
- Bracket depth tracking for [content] arguments
- Escaped brackets (\\[ and \\]) are literal and never delimit
- Line/column tracking for error reporting

Example:
    >>> parser = TagParser("<!--deck new; inject[hello]; -->")
    >>> parser.parse()
    [NewPage(), Inject(content='hello')]
"""

from enum import Enum
from typing import List, NoReturn, Optional, Type

from ..config import appsettings, AppSettings
from ..models.commands import Command, CommandSpec, spec_get
from ..models.parser import Annotation, BlockMatch
from .errors import DeckError, MalformedCommand, UnknownCommand
from .log import LOG


class ScanState(Enum):
    """States of the statement scanner"""
    OUTSIDE = "outside"              # between statements
    IN_NAME = "in_name"              # reading a statement name
    AFTER_NAME = "after_name"        # name read, expecting [ or ;
    IN_CONTENT = "in_content"        # inside [bracketed] content
    AFTER_CONTENT = "after_content"  # content closed, expecting ;


ESCAPABLE = "[]"


def nameChar_is(ch: str) -> bool:
    """Characters allowed in a statement name"""
    return ch.isalnum() or ch in "-_"


class TagParser:
    r"""
    Parser for the annotation command language

    Handles:
    - Locating the annotation block of a cell
    - Splitting the block into ;-terminated statements
    - Bracketed content with \[ and \] escapes
    - Error reporting with line numbers and a context caret
    """

    def __init__(self, source: str, settings: Optional[AppSettings] = None):
        """
        Initialize parser with the raw text of one cell

        Args:
            source: Raw markdown text of the cell
            settings: Settings providing the block tokens (defaults to appsettings)
        """
        self.source = source
        self.settings = settings or appsettings
        self.position = 0

    def block_locate(self) -> Optional[BlockMatch]:
        """
        Find the opening token of the annotation block

        Returns:
            BlockMatch with start and body positions, or None if the cell has
            no annotation block. The end position is filled in by the scanner.
        """
        start = self.source.find(self.settings.block_open)
        if start == -1:
            return None
        return BlockMatch(start=start, body_start=start + len(self.settings.block_open))

    def annotation_extract(self) -> Annotation:
        """
        Extract the commands and the text around the annotation block

        Returns:
            Annotation with the commands in source order and the leading and
            trailing cell text. Without a block the whole text is leading.

        Raises:
            UnknownCommand: A statement name is not recognized
            MalformedCommand: A statement, bracket or the block is unterminated
        """
        match = self.block_locate()
        if match is None:
            return Annotation(leading=self.source)

        commands = self.statements_scan(match)
        LOG(f"Annotation block at {match.start}-{match.end}: {len(commands)} commands", level=3)

        return Annotation(
            commands=commands,
            leading=self.source[:match.start],
            trailing=self.source[match.end:],
            found=True,
        )

    def parse(self) -> List[Command]:
        """
        Parse the cell text into its command sequence

        Returns:
            Commands in source order, empty if the cell has no annotation block.
        """
        return self.annotation_extract().commands

    def statements_scan(self, match: BlockMatch) -> List[Command]:
        r"""
        Scan the block body statement by statement

        Walks the body once, character by character. Whitespace between
        tokens is skipped. In IN_CONTENT state unescaped brackets change the
        depth and the matching ] closes the content; \[ and \] are copied
        without their backslash. No other escape is decoded: \n, \" and \'
        stay as written, so content reaches the page exactly as typed.

        Args:
            match: Block location; match.end is set when the closing token
                   is reached

        Returns:
            Commands in source order
        """
        source = self.source
        close = self.settings.block_close
        commands: List[Command] = []

        state = ScanState.OUTSIDE
        spec: CommandSpec
        name_start = 0
        content_start = 0
        content: List[str] = []
        depth = 0
        pos = match.body_start

        while pos < len(source):
            ch = source[pos]
            self.position = pos

            if state is ScanState.OUTSIDE:
                if source.startswith(close, pos):
                    match.end = pos + len(close)
                    return commands
                if ch.isspace():
                    pos += 1
                elif ch == ";":
                    self.error(MalformedCommand, "Empty statement")
                elif nameChar_is(ch):
                    state = ScanState.IN_NAME
                    name_start = pos
                    pos += 1
                else:
                    self.error(MalformedCommand, f"Unexpected character {ch!r}")

            elif state is ScanState.IN_NAME:
                if nameChar_is(ch) and not source.startswith(close, pos):
                    pos += 1
                    continue
                spec = self.spec_resolve(source[name_start:pos], name_start)
                state = ScanState.AFTER_NAME

            elif state is ScanState.AFTER_NAME:
                if ch.isspace():
                    pos += 1
                elif spec.takes_content and ch == "[":
                    state = ScanState.IN_CONTENT
                    content_start = pos
                    content = []
                    depth = 1
                    pos += 1
                elif spec.takes_content:
                    self.error(MalformedCommand, f"Expected '[' after '{spec.name}'")
                elif ch == ";":
                    commands.append(spec.command_make())
                    state = ScanState.OUTSIDE
                    pos += 1
                elif ch == "[":
                    self.error(MalformedCommand, f"'{spec.name}' takes no [content]")
                else:
                    self.error(MalformedCommand, f"Missing ';' after '{spec.name}'")

            elif state is ScanState.IN_CONTENT:
                if ch == "\\" and pos + 1 < len(source) and source[pos + 1] in ESCAPABLE:
                    content.append(source[pos + 1])
                    pos += 2
                    continue
                if ch == "[":
                    depth += 1
                elif ch == "]":
                    depth -= 1
                    if depth == 0:
                        state = ScanState.AFTER_CONTENT
                        pos += 1
                        continue
                content.append(ch)
                pos += 1

            elif state is ScanState.AFTER_CONTENT:
                if ch.isspace():
                    pos += 1
                elif ch == ";":
                    commands.append(spec.command_make("".join(content)))
                    state = ScanState.OUTSIDE
                    pos += 1
                else:
                    self.error(MalformedCommand, f"Missing ';' after '{spec.name}[...]'")

        # End of cell reached without the closing token
        self.position = len(source)
        if state is ScanState.IN_NAME:
            spec = self.spec_resolve(source[name_start:], name_start)
            state = ScanState.AFTER_NAME
        if state is ScanState.IN_CONTENT:
            self.position = content_start
            self.error(MalformedCommand, f"Unterminated bracket in '{spec.name}'")
        if state is not ScanState.OUTSIDE:
            self.error(MalformedCommand, f"Unterminated statement '{spec.name}', missing ';'")
        self.position = match.start
        self.error(MalformedCommand, f"Annotation block is missing its closing '{close}'")

    def spec_resolve(self, name: str, position: int) -> CommandSpec:
        """
        Look up the statement specification for a name

        Raises:
            UnknownCommand: If the name is not a known statement
        """
        spec = spec_get(name)
        if spec is None:
            self.position = position
            self.error(UnknownCommand, f"Unknown command '{name}'")
        return spec

    def error(self, kind: Type[DeckError], message: str) -> NoReturn:
        """
        Report a parse error with source context

        Raises the given error kind with a message including the line and
        column inside the cell and a caret under the offending character.

        Example output:
            Unknown command 'nwe'
            Line 1, column 9
            Context: <!--deck nwe; -->
                              ^
        """
        line_start = self.source.rfind("\n", 0, self.position) + 1
        line_end = self.source.find("\n", self.position)
        if line_end == -1:
            line_end = len(self.source)
        line_number = self.source.count("\n", 0, self.position) + 1
        column = self.position - line_start

        raise kind(
            f"{message}\n"
            f"Line {line_number}, column {column + 1}\n"
            f"Context: {self.source[line_start:line_end]}\n"
            f"         {' ' * column}^"
        )
