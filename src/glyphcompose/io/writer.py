"""Project writer for saving project documents.

This module provides the ProjectWriter class for writing a Project back to
the JSON document format, carrying over any tool state from the document
it was loaded from.
"""

import json
from datetime import datetime
from pathlib import Path

from glyphcompose.domain import Project
from glyphcompose.exceptions import ProjectSaveError
from glyphcompose.io.converter import project_to_document
from glyphcompose.io.schema import ProjectDocument


class ProjectWriter:
    """Writes projects as JSON documents.

    Example:
        writer = ProjectWriter(project, Path("font-composed.json"), reader.document)
        writer.save()
    """

    def __init__(
        self,
        project: Project,
        output_path: Path,
        document: ProjectDocument | None = None,
    ) -> None:
        """Initialize the project writer.

        Args:
            project: Project to write
            output_path: Path where the project will be saved
            document: Document the project was loaded from, if any
        """
        self._project = project
        self._output_path = output_path
        self._document = document

    def build_document(self) -> ProjectDocument:
        """Build the document that ``save`` writes, stamped with the save time."""
        document = project_to_document(self._project, self._document)
        document.saved_at = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")
        return document

    def save(self) -> None:
        """Save the project file to the output path.

        Raises:
            ProjectSaveError: If the file cannot be written
        """
        payload = json.dumps(self.build_document().dump(), ensure_ascii=False, indent=2)
        try:
            self._output_path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            raise ProjectSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_composed_path(input_path: Path) -> Path:
        """Generate the default output path for a composed project.

        Converts: font.json -> font-composed.json

        Args:
            input_path: Original project file path

        Returns:
            Path with -composed suffix before extension
        """
        return input_path.parent / f"{input_path.stem}-composed{input_path.suffix}"
