"""Comment model for review comments picked up by the workflow."""

from pydantic import BaseModel


class Comment(BaseModel):
    """A review comment as delivered by the CI trigger."""

    body: str
    url: str
    timestamp: str  # ISO-8601 instant

    model_config = {"frozen": True}
