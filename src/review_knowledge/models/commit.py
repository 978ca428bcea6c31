"""Commit models for publishing the policy document."""

from typing import List

from pydantic import BaseModel


class CommitRecord(BaseModel):
    """Request to commit a set of files and push them to a branch."""

    file_paths: List[str]
    message: str
    branch: str

    model_config = {"frozen": True}


class CommitResult(BaseModel):
    """Outcome of a successful commit and push."""

    commit_hash: str
    branch: str
    pushed: bool = True
