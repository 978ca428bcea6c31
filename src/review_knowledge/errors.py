"""Error kinds raised by the review knowledge pipeline."""


class KnowledgeError(Exception):
    """Base class for every failure the pipeline reports."""


class ValidationError(KnowledgeError):
    """A required input is missing or empty."""


class FormatError(KnowledgeError):
    """A timestamp, URL or timezone could not be parsed."""


class FileIOError(KnowledgeError):
    """The file system refused a read or write (a missing file is not one)."""

    def __init__(self, path, message: str):
        super().__init__(f"Failed to access file at {path}: {message}")
        self.path = path


class GitError(KnowledgeError):
    """Staging, committing or pushing failed."""
