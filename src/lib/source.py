"""
Notebook document source

Reads an `.ipynb` file with nbformat and turns it into an ordered list of
immutable Cell values carrying only what the page builder needs: the cell
text, the captured stream output and the captured error.
"""

from pathlib import Path
from typing import Any, List, Optional

import nbformat
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ..config import appsettings, AppSettings
from ..models.cells import Cell, CellError, CellKind
from .errors import DocumentReadError
from .log import LOG


def language_resolve(name: Optional[str], default: str) -> str:
    """
    Normalise a kernel language name to a code fence language

    Names known to the Pygments lexer registry are fence aliases and are
    lower-cased (e.g. "Python" -> "python", "R" -> "r"). Unknown names are
    kept as given; a missing name gives the default.
    """
    if not name:
        return default
    try:
        get_lexer_by_name(name.lower())
    except ClassNotFound:
        LOG(f"No highlighter known for language '{name}'", level=2)
        return name
    return name.lower()


class NotebookSource:
    """
    Reads the cells of one notebook

    Attributes:
        path: Notebook path
        settings: Settings providing the default code language
    """

    def __init__(self, path: Path, settings: Optional[AppSettings] = None) -> None:
        self.path = Path(path)
        self.settings = settings or appsettings

    def notebook_read(self) -> Any:
        """
        Load and validate the notebook as nbformat v4

        Raises:
            DocumentReadError: File unreadable or not a valid notebook
        """
        try:
            return nbformat.read(str(self.path), as_version=4)
        except OSError as e:
            raise DocumentReadError(f"Unable to read notebook: {e}", path=self.path)
        except Exception as e:
            # nbformat raises NotJSONError, ValidationError or plain ValueError
            raise DocumentReadError(f"Unable to decode notebook: {e}", path=self.path)

    def language_get(self, notebook: Any) -> str:
        """Code language from language_info.name, then kernelspec.language"""
        metadata = notebook.get("metadata", {})
        name = metadata.get("language_info", {}).get("name") or \
            metadata.get("kernelspec", {}).get("language")
        return language_resolve(name, self.settings.default_language)

    def cells_read(self) -> List[Cell]:
        """
        Read the notebook into Cell values, in notebook order

        Returns:
            List of Cells; unknown cell types are skipped
        """
        notebook = self.notebook_read()
        language = self.language_get(notebook)

        cells = []
        for index, raw in enumerate(notebook.cells):
            cell = self.cell_convert(raw, index, language)
            if cell is None:
                LOG(f"Skipping cell {index} of unsupported type '{raw.get('cell_type')}'", level=2)
                continue
            cells.append(cell)

        LOG(f"Read {len(cells)} cells from {self.path.name} (language: {language})", level=2)
        return cells

    def cell_convert(self, raw: Any, index: int, language: str) -> Optional[Cell]:
        """Convert one nbformat cell into a Cell, None for unknown types"""
        cell_type = raw.get("cell_type")
        source = raw.get("source", "")
        if isinstance(source, list):
            source = "".join(source)

        if cell_type == "markdown":
            return Cell(kind=CellKind.MARKDOWN, source=source, index=index)
        if cell_type == "raw":
            return Cell(kind=CellKind.RAW, source=source, index=index)
        if cell_type != "code":
            return None

        streams = []
        error = None
        for output in raw.get("outputs", []):
            output_type = output.get("output_type")
            if output_type == "stream":
                text = output.get("text", "")
                streams.append("".join(text) if isinstance(text, list) else text)
            elif output_type == "error" and error is None:
                error = CellError(ename=output.get("ename", ""), evalue=output.get("evalue", ""))

        return Cell(
            kind=CellKind.CODE,
            source=source,
            index=index,
            stream="".join(streams) if streams else None,
            error=error,
            language=language,
        )
