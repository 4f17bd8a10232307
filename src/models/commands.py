"""
Command variants and statement specifications

Defines the closed set of commands an annotation block can carry, and the
statement-name table the tag parser validates names against.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Type, Union


@dataclass(frozen=True)
class NewPage:
    """Begin a new page and make it current"""


@dataclass(frozen=True)
class StartAdding:
    """Turn adding-mode on for the current document"""


@dataclass(frozen=True)
class StopAdding:
    """Turn adding-mode off for the current document"""


@dataclass(frozen=True)
class Inject:
    """Append literal text to the current page"""
    content: str


@dataclass(frozen=True)
class WrapImage:
    """
    Fill a template with the image paths of the current cell

    The template holds `{}` / `{N}` placeholders; it is applied to the
    image references found in the cell text, not to the content itself.
    """
    content: str


@dataclass(frozen=True)
class SetClass:
    """Set the class label of the page the command resolves to"""
    content: str


Command = Union[NewPage, StartAdding, StopAdding, Inject, WrapImage, SetClass]


@dataclass(frozen=True)
class CommandSpec:
    """
    Specification for an annotation statement

    Attributes:
        name: Statement name as written in the annotation block
        variant: Command dataclass the statement builds
        takes_content: Whether the statement requires a [bracketed] argument
        strip_content: Whether surrounding whitespace is removed from the argument
    """
    name: str
    variant: Type
    takes_content: bool
    strip_content: bool = False

    def command_make(self, content: Optional[str] = None) -> Command:
        """Build the command value for this statement"""
        if not self.takes_content:
            return self.variant()
        content = content or ""
        return self.variant(content.strip() if self.strip_content else content)


COMMAND_SPECS: Dict[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec("new", NewPage, False),
        CommandSpec("start-add", StartAdding, False),
        CommandSpec("stop-add", StopAdding, False),
        CommandSpec("inject", Inject, True),
        CommandSpec("wrap-image", WrapImage, True),
        CommandSpec("class", SetClass, True, strip_content=True),
    )
}


def spec_get(name: str) -> Optional[CommandSpec]:
    """Look up a statement specification by name"""
    return COMMAND_SPECS.get(name)
