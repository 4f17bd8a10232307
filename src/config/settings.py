"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use NOTEDECK_ prefix (e.g., NOTEDECK_INCLUDE_STREAM=false).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use NOTEDECK_ prefix.

    Examples:
        NOTEDECK_BLOCK_OPEN="<!--slides"
        NOTEDECK_INCLUDE_ERROR=false
        NOTEDECK_FRONT_MATTER="layout: true"
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTEDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Annotation block configuration
    block_open: str = Field(
        default="<!--deck",
        description="Token opening the annotation block inside a markdown cell",
    )

    block_close: str = Field(
        default="-->",
        description="Token closing the annotation block inside a markdown cell",
    )

    # Input configuration
    document_suffix: str = Field(
        default=".ipynb",
        description="File suffix identifying notebook documents",
    )

    walk_ignore: List[str] = Field(
        default_factory=list,
        description="Directory name patterns skipped while expanding input directories (none by default)",
    )

    # Page content configuration
    include_stream: bool = Field(
        default=True,
        description="Append captured stream output of code cells while adding",
    )

    include_error: bool = Field(
        default=True,
        description="Append captured error (ename: evalue) of code cells while adding",
    )

    default_language: str = Field(
        default="python",
        description="Code fence language when the notebook metadata names none",
    )

    relocate_images: bool = Field(
        default=True,
        description="Rewrite relative image paths so they resolve from the output file",
    )

    # Output configuration
    front_matter: str = Field(
        default="",
        description="Fixed block written at the top of the output before any preamble",
    )

    page_delimiter: str = Field(
        default="\n\n---\n\n",
        description="Separator written between the preamble and pages",
    )

    class_marker: str = Field(
        default="class: {label}",
        description="Template of the class line preceding the content of a classed page",
    )

    def classMarker_make(self, label: str) -> str:
        """
        Render the class marker line for a page label.

        Example:
            >>> AppSettings().classMarker_make("topic")
            'class: topic'
        """
        return self.class_marker.format(label=label)


# Singleton instance - import this in your code
appsettings = AppSettings()
