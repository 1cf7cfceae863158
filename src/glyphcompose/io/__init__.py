"""Project I/O layer for glyphcompose.

This module handles reading and writing the authoring tool's JSON project
documents. It provides a clean abstraction layer between the document
encoding and the domain models.

Key responsibilities:
- Validate project documents (pydantic)
- Convert documents to domain models, normalising legacy encodings
- Write projects back with structured cache records

Key classes:
- ProjectReader: Load project documents
- ProjectWriter: Save projects
- ProjectDocument: Validated document model
"""

from glyphcompose.io.reader import ProjectReader
from glyphcompose.io.schema import ProjectDocument
from glyphcompose.io.writer import ProjectWriter

__all__ = [
    "ProjectDocument",
    "ProjectReader",
    "ProjectWriter",
]
