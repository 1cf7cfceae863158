"""Project reader for loading project documents.

This module provides the ProjectReader class for loading the authoring
tool's JSON project files and converting them into a domain Project.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from glyphcompose.domain import Project
from glyphcompose.exceptions import ProjectFormatError, ProjectLoadError
from glyphcompose.io.converter import document_to_project
from glyphcompose.io.schema import ProjectDocument


class ProjectReader:
    """Loads project documents and converts them to domain models.

    Example:
        reader = ProjectReader(Path("font.json"))
        reader.load()
        project = reader.read_project()
        print(reader.name, len(project.outlines))
    """

    def __init__(self, project_path: Path) -> None:
        """Initialize the project reader.

        Args:
            project_path: Path to the JSON project file
        """
        self._project_path = project_path
        self._document: ProjectDocument | None = None

    def load(self) -> None:
        """Load and validate the project file.

        Raises:
            FileNotFoundError: If the project file does not exist
            ProjectLoadError: If the file cannot be read or is not JSON
            ProjectFormatError: If the document does not match the schema
        """
        if not self._project_path.exists():
            raise FileNotFoundError(f"Project file not found: {self._project_path}")

        try:
            raw = json.loads(self._project_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProjectLoadError(str(self._project_path), str(e)) from e

        try:
            self._document = ProjectDocument.model_validate(raw)
        except ValidationError as e:
            raise ProjectFormatError(str(self._project_path), str(e)) from e

    @property
    def document(self) -> ProjectDocument:
        """Return the validated document.

        Raises:
            RuntimeError: If the project has not been loaded yet
        """
        if self._document is None:
            raise RuntimeError("Project not loaded. Call load() first.")

        return self._document

    @property
    def name(self) -> str:
        """Return the project's display name, falling back to the file stem."""
        return self.document.name or self._project_path.stem

    @property
    def glyph_count(self) -> int:
        """Return the number of stored outlines."""
        return len(self.document.glyphs)

    def read_project(self) -> Project:
        """Convert the loaded document to a Project.

        Returns:
            Project domain model

        Raises:
            RuntimeError: If the project has not been loaded yet
            InvalidRuleError: If an authored rule has an unusable shape
            ProjectFormatError: If a cache key is malformed
        """
        try:
            return document_to_project(self.document)
        except ValueError as e:
            raise ProjectFormatError(str(self._project_path), str(e)) from e

    def close(self) -> None:
        """Drop the loaded document."""
        self._document = None

    def __enter__(self) -> "ProjectReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
