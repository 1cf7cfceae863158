"""Exception hierarchy for glyphcompose.

The engine itself degrades silently on incomplete data; these exceptions
are raised by the project I/O layer, the rule converter, and the CLI.
"""


class GlyphComposeError(Exception):
    """Base exception for all glyphcompose errors."""

    pass


class ProjectError(GlyphComposeError):
    """Errors related to project loading or saving."""

    pass


class ProjectLoadError(ProjectError):
    """Error loading a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load project '{path}': {reason}")


class ProjectSaveError(ProjectError):
    """Error saving a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save project '{path}': {reason}")


class ProjectFormatError(ProjectError):
    """Project document does not match the expected schema."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid project format '{path}': {details}")


class RuleError(GlyphComposeError):
    """Errors related to authored rules."""

    pass


class InvalidRuleError(RuleError):
    """An authored rule has an unusable shape."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid rule: {reason}")


class CharacterError(GlyphComposeError):
    """Errors related to character lookup."""

    pass


class CharacterNotFoundError(CharacterError):
    """Requested character not found in the project."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Character '{name}' not found in project")
