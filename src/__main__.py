#!/usr/bin/env python3
"""
notedeck - Notebook to slide-deck compiler

Builds a single remark-style markdown presentation from annotated Jupyter
notebooks, so a technical notebook and its slides are authored once and
kept in sync.

Philosophy:
    - Notebook-first: the notebook stays the source of truth
    - Annotation blocks: <!--deck new; start-add; --> inside markdown cells
    - Whole-run output: every run rebuilds the complete deck from scratch

Annotation statements:
    new;                  start a new page
    start-add; stop-add;  toggle copying of cell content onto the page
    inject[text];         append literal text to the page
    wrap-image[tmpl];     fill a template with the cell's image paths
    class[label];         set the class of the page

Usage:
    notedeck -o OUTPUT [-f] [-v] INPUT [INPUT ...]

    Inputs are notebooks, other files (injected verbatim) or directories
    (notebooks found recursively, in name order).

Examples:
    # Title page followed by every notebook of a course
    notedeck -o slides/course.rmd title.rmd notebooks/

    # Rebuild, overwriting the previous output, with per-file logging
    notedeck -f -v -o slides/course.rmd title.rmd notebooks/
"""

import sys
from pathlib import Path
from typing import List, Optional
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter

from .lib import DeckAssembler, DeckRenderer, PathWalker, __version__, LOG, state_connectToLogger
from .lib.errors import DeckError, OutputExists
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
              _            _           _
  _ __   ___ | |_ ___   __| | ___  ___| | __
 | '_ \ / _ \| __/ _ \ / _` |/ _ \/ __| |/ /
 | | | | (_) | ||  __/| (_| |  __/ (__|   <
 |_| |_|\___/ \__\___| \__,_|\___|\___|_|\_\

  Notebook to slide-deck compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    prog="notedeck",
    description="notedeck - Create a presentation from annotated .ipynb notebooks",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "-o", "--output", required=True, type=str, help="Path where the presentation is saved"
)

parser.add_argument(
    "-f", "--force", action="store_true", help="Overwrite the output file if it already exists"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

parser.add_argument(
    "inputs", nargs="+", type=str, help="Notebooks, files or folders, in presentation order"
)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the output path against the force flag.

    Returns:
        ProgramState with added fields:
            - outputFile: Resolved output path
            - envOK: True if the environment is valid

    Exits:
        1 if the output file exists and --force was not given
    """
    state = inputstate.copy()

    if state.verbosity >= 3:
        LOG(DISPLAY_TITLE, level=3)

    LOG("Checking environment...", level=2)

    state.outputFile = Path(state.output)
    if state.outputFile.exists() and not state.force:
        error = OutputExists(
            f'File already exists: {state.outputFile}. Use "-f" to force an override.'
        )
        print(f"Error: {error}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Output file: {state.outputFile}", level=2)
    state.envOK = True
    return state


def paths_walk(inputstate: ProgramState) -> ProgramState:
    """
    Expand the input roots into concrete paths.

    Returns:
        ProgramState with added field:
            - inputPaths: Ordered list of files to process

    Exits:
        1 if an input path does not exist
    """
    state = inputstate.copy()

    LOG("Collecting input files...", level=1)
    try:
        state.inputPaths = PathWalker(state.inputs).walk()
    except DeckError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Found {len(state.inputPaths)} files", level=2)
    return state


def deck_assemble(inputstate: ProgramState) -> ProgramState:
    """
    Build the deck from every input file.

    Returns:
        ProgramState with added field:
            - deck: Assembled Deck

    Exits:
        1 on any annotation, page or read error (no output is written)
    """
    state = inputstate.copy()

    LOG("Assembling pages...", level=1)
    try:
        state.deck = DeckAssembler(output_path=state.outputFile).paths_assemble(state.inputPaths)
    except DeckError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Assembled {len(state.deck.pages)} pages", level=2)
    return state


def deck_write(inputstate: ProgramState) -> ProgramState:
    """
    Render the deck and write the output file.

    Returns:
        ProgramState with added field:
            - writeResult: Dict containing:
                - output_file: str (path of the written presentation)
                - page_count: int (number of pages)
                - bytes: int (size of the written file)

    Exits:
        1 if the deck is missing or the file cannot be written
    """
    state = inputstate.copy()

    if state.deck is None:
        print("Error: No deck available", file=sys.stderr)
        sys.exit(1)

    LOG("Writing presentation...", level=1)
    text = DeckRenderer().render(state.deck)
    try:
        if state.outputFile.parent != Path(""):
            state.outputFile.parent.mkdir(parents=True, exist_ok=True)
        with open(state.outputFile, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    state.writeResult = {
        "output_file": str(state.outputFile),
        "page_count": len(state.deck.pages),
        "bytes": len(text.encode("utf-8")),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the run summary.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Presentation was not written", file=sys.stderr)
        sys.exit(1)

    LOG("✓ The presentation was successfully created.", level=1)
    LOG(f"  Output: {state.writeResult['output_file']}", level=1)
    LOG(f"  Pages:  {state.writeResult['page_count']}", level=1)
    return state


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - build the presentation from the given inputs.

    Orchestrates the full pipeline:
        1. env_check: Validate the output path
        2. paths_walk: Expand input roots into files
        3. deck_assemble: Parse annotations and build pages
        4. deck_write: Render and write the presentation
        5. results_report: Display results to user

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        0 on success; failures exit with status 1
    """
    options = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, paths_walk, deck_assemble, deck_write, results_report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
