"""Strip the [must] marker from review comment bodies."""

import re

from review_knowledge.errors import ValidationError

MUST_MARKER = re.compile(r"^\[must\]\s*", re.IGNORECASE)


def normalize_comment(raw: str) -> str:
    """Remove a leading ``[must]`` marker and the whitespace after it.

    Everything else, including embedded newlines and trailing whitespace,
    is returned untouched.

    Raises:
        ValidationError: If the comment is empty or whitespace only.
    """
    if not raw or not raw.strip():
        raise ValidationError("COMMENT_BODY is empty")

    return MUST_MARKER.sub("", raw, count=1)
