"""Read and append to the policy document on disk."""

from pathlib import Path
from typing import Union

from review_knowledge.errors import FileIOError
from review_knowledge.models.results import ReadResult, WriteResult

WRITE_MODES = ("append", "write")


def read_file(path: Union[str, Path], encoding: str = "utf-8") -> ReadResult:
    """Read a file, returning empty content if it does not exist."""
    path = Path(path)
    try:
        content = path.read_text(encoding=encoding)
    except FileNotFoundError:
        return ReadResult(content="", exists=False)
    except (OSError, UnicodeDecodeError) as e:
        raise FileIOError(path, str(e)) from e

    return ReadResult(content=content, exists=True)


def write_file(
    path: Union[str, Path], content: str, mode: str = "append"
) -> WriteResult:
    """Write or append ``content`` as UTF-8, creating parent directories.

    Args:
        path: File to write
        content: Text to write
        mode: ``"append"`` adds to the end, ``"write"`` overwrites

    Returns:
        WriteResult with the number of UTF-8 bytes written
    """
    if mode not in WRITE_MODES:
        raise ValueError(f"Unknown write mode: {mode}")

    path = Path(path)
    data = content.encode("utf-8")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "ab" if mode == "append" else "wb") as f:
            f.write(data)
    except OSError as e:
        raise FileIOError(path, str(e)) from e

    return WriteResult(success=True, bytes_written=len(data))
