"""
Reading and writing source files off the event loop.
"""

import asyncio
from pathlib import Path

from ng_i18n_extract.utils.errors import SourceReadError, SourceWriteError

ENCODING = "utf-8"


async def read_source(path: Path) -> str:
    """
    Read a source file as UTF-8 text.

    Raises:
        SourceReadError: If the file cannot be read or decoded
    """
    try:
        return await asyncio.to_thread(_read, path)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(str(path), str(e)) from e


async def write_source(path: Path, content: str) -> None:
    """
    Write rewritten source back to ``path``.

    Raises:
        SourceWriteError: If the file cannot be written
    """
    try:
        await asyncio.to_thread(_write, path, content)
    except OSError as e:
        raise SourceWriteError(str(path), str(e)) from e


def _read(path: Path) -> str:
    # newline="" keeps CRLF line endings byte-identical on rewrite
    with open(path, "r", encoding=ENCODING, newline="") as f:
        return f.read()


def _write(path: Path, content: str) -> None:
    with open(path, "w", encoding=ENCODING, newline="") as f:
        f.write(content)
