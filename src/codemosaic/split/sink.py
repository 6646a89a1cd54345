"""Atomic output writes for parts and combined documents."""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator


def _target_mode(path: Path) -> int:
    """Permission bits for ``path``: kept if it exists, else 0666 minus umask."""
    try:
        return os.stat(path).st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def part_path(output_dir: Path, base_name: str, number: int, ext: str) -> Path:
    """Destination of part ``number``: ``{base_name}_part{number}{ext}``."""
    return Path(output_dir) / f"{base_name}_part{number}{ext}"


@contextmanager
def atomic_write(path: Path) -> Iterator[BinaryIO]:
    """Yield a binary handle whose content replaces ``path`` on success.

    Data goes to a temporary file in the destination directory and is renamed
    over ``path`` only after a clean exit. The result gets the permissions a
    plain write would give it. On any exception the temporary file
    is removed and ``path`` is left untouched.
    """
    path = Path(path)
    temp_file = tempfile.NamedTemporaryFile(
        mode="wb",
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
        delete=False,
    )
    try:
        with temp_file:
            yield temp_file
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.chmod(temp_file.name, _target_mode(path))
        os.replace(temp_file.name, path)
    except BaseException:
        try:
            os.unlink(temp_file.name)
        except FileNotFoundError:
            pass
        raise
