"""Render review comments as policy document entries."""

import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from review_knowledge.errors import FormatError
from review_knowledge.models.comment import Comment

DEFAULT_TIMEZONE = "Asia/Tokyo"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

_url_adapter = TypeAdapter(AnyUrl)

# scheme, "://" and no whitespace anywhere
ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://\S+\Z")


def localize_timestamp(timestamp: str, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Render an ISO-8601 instant as ``YYYY/MM/DD HH:MM:SS`` in ``tz_name``.

    Timestamps without an offset are taken to be UTC.
    """
    try:
        instant = datetime.fromisoformat(timestamp.strip())
    except (AttributeError, ValueError) as e:
        raise FormatError(f"Invalid timestamp: {timestamp!r}") from e

    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise FormatError(f"Unknown timezone: {tz_name!r}") from e

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    return instant.astimezone(tz).strftime(TIMESTAMP_FORMAT)


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute URL and return it unchanged."""
    if not isinstance(url, str) or not ABSOLUTE_URL.match(url):
        raise FormatError(f"Invalid URL: {url!r}")

    try:
        parsed = _url_adapter.validate_python(url)
    except PydanticValidationError as e:
        raise FormatError(f"Invalid URL: {url!r}") from e

    if not parsed.host:
        raise FormatError(f"URL has no host: {url!r}")
    return url


def format_block(comment: Comment, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Build the Markdown block appended to the policy document."""
    localized = localize_timestamp(comment.timestamp, tz_name)
    url = validate_url(comment.url)

    return f"\n---\n## [追加日時: {localized}]\n出典: {url}\n\n{comment.body}\n\n"
