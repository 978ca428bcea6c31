"""Result models for file access and pipeline runs."""

from pathlib import Path

from pydantic import BaseModel


class ReadResult(BaseModel):
    """Content of a file, or an empty string if it does not exist."""

    content: str
    exists: bool


class WriteResult(BaseModel):
    """Outcome of a write or append."""

    success: bool
    bytes_written: int


class PipelineResult(BaseModel):
    """Summary of one append-and-commit run."""

    target_path: Path
    bytes_written: int
    commit_hash: str
    branch: str
