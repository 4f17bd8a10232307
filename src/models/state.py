"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the deck pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: output, force, verbosity, inputs
        - env_check: outputFile, envOK
        - paths_walk: inputPaths
        - deck_assemble: deck
        - deck_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        output: Output file path as given on the command line
        force: Overwrite the output file if it exists
        verbosity: Logging verbosity level (1-3)
        inputs: Root input paths (files or directories) in caller order
        envOK: Environment validation passed
        outputFile: Resolved output path
        inputPaths: Concrete paths produced by the path walker
        deck: Assembled Deck
        writeResult: Write results (output_file, page_count, bytes)
    """

    # CLI arguments
    output: str = field(default="")
    force: bool = field(default=False)
    verbosity: int = field(default=1)
    inputs: List[str] = field(default_factory=list)

    # Pipeline state
    envOK: bool = field(default=False)
    outputFile: Path = field(default=Path("/"))
    inputPaths: List[Path] = field(default_factory=list)
    deck: Optional[Any] = field(default=None)  # Deck at runtime
    writeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Args:
            options: Parsed CLI arguments (output, force, verbosity, inputs)

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that exist in ProgramState
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            paths_walk,
            deck_assemble,
            deck_write,
            results_report
        )

    This is equivalent to:
        results_report(deck_write(deck_assemble(paths_walk(env_check(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
