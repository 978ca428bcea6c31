"""Data models for Review Knowledge."""

from .comment import Comment
from .commit import CommitRecord, CommitResult
from .results import PipelineResult, ReadResult, WriteResult

__all__ = [
    "Comment",
    "CommitRecord",
    "CommitResult",
    "PipelineResult",
    "ReadResult",
    "WriteResult",
]
