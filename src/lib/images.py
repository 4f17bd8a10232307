"""
Image reference helpers

Finds image paths in markdown text, fills `wrap-image` templates with them,
and relocates relative paths so they resolve from the output file.

Two reference styles are recognized:
    ![alt](path)                markdown image
    <img src="path" ...>        any HTML tag with a src="..." or src='...'
"""

import os
import re
from pathlib import Path
from typing import List

from ..models.parser import ImageReference
from .errors import ImageWrapError


IMAGE_PATTERN = re.compile(
    r"!\[[^\]]*\]\((?P<md>[^)]*)\)"
    r"|<[^<>]*?\bsrc\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')[^<>]*>"
)

# Paths with these prefixes are never relocated
ABSOLUTE_PREFIXES = ("/", "http://", "https://", "data:")


def references_find(markdown: str) -> List[ImageReference]:
    """
    Find all image references in text, in order of appearance

    Example:
        >>> references_find('![a](./x.png) <img src="y.svg">')
        [ImageReference(path='./x.png', start=5, end=12),
         ImageReference(path='y.svg', start=24, end=29)]
    """
    references = []
    for match in IMAGE_PATTERN.finditer(markdown):
        group = next(g for g in ("md", "dq", "sq") if match.group(g) is not None)
        references.append(
            ImageReference(path=match.group(group), start=match.start(group), end=match.end(group))
        )
    return references


def wrap_fill(markdown: str, template: str) -> str:
    """
    Fill a wrap-image template with the image paths found in markdown

    Each `{}` placeholder takes the path whose index equals the placeholder's
    ordinal in the template; `{N}` takes path N explicitly.

    Args:
        markdown: Cell text to collect image paths from
        template: Template containing placeholders

    Returns:
        The filled template

    Raises:
        ImageWrapError: Unclosed `{`, non-integer index, or index out of range

    Example:
        >>> wrap_fill("![](a.png)\\n![](b.png)", '<img src="{1}"><img src="{0}">')
        '<img src="b.png"><img src="a.png">'
    """
    paths = [reference.path for reference in references_find(markdown)]

    filled = []
    pos = 0
    ordinal = 0
    while True:
        open_pos = template.find("{", pos)
        if open_pos == -1:
            break
        close_pos = template.find("}", open_pos + 1)
        if close_pos == -1:
            raise ImageWrapError(f"Unclosed '{{' in wrap-image template at position {open_pos}")

        inner = template[open_pos + 1:close_pos].strip()
        if inner:
            try:
                index = int(inner)
            except ValueError:
                raise ImageWrapError(f"Invalid image index '{inner}' in wrap-image template")
        else:
            index = ordinal

        if not 0 <= index < len(paths):
            raise ImageWrapError(
                f"Image index {index} out of range, the cell has {len(paths)} image(s)"
            )

        filled.append(template[pos:open_pos])
        filled.append(paths[index])
        ordinal += 1
        pos = close_pos + 1

    filled.append(template[pos:])
    return "".join(filled)


def path_relocate(path: str, output_path: Path, notebook_path: Path) -> str:
    """
    Rewrite one image path, relative to the notebook, so it is relative to
    the directory of the output file. Absolute paths and URLs are returned
    unchanged.
    """
    if not path or path.startswith(ABSOLUTE_PREFIXES):
        return path
    target = os.path.join(str(notebook_path.parent), path)
    relocated = os.path.relpath(target, start=str(output_path.parent))
    return Path(relocated).as_posix()


def paths_relocate(markdown: str, output_path: Path, notebook_path: Path) -> str:
    """
    Relocate every image path in markdown, leaving the rest untouched

    Example:
        For output "presentations/deck.rmd" and notebook "notebooks/intro.ipynb":
        "![](./images/a.png)" -> "![](../notebooks/images/a.png)"
    """
    # Replace back to front so earlier spans stay valid
    for reference in reversed(references_find(markdown)):
        relocated = path_relocate(reference.path, output_path, notebook_path)
        markdown = markdown[:reference.start] + relocated + markdown[reference.end:]
    return markdown
