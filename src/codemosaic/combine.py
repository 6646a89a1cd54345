"""Concatenate source files into one document."""

from pathlib import Path
from typing import Sequence

from .core.errors import NoMatchingFilesError
from .core.logging import log
from .core.models import CombineResult
from .split.sink import atomic_write


def metadata_header(index: int, path: Path, comment_prefix: str = "//") -> str:
    """Header written before file ``index`` (1-based)."""
    size = path.stat().st_size
    return f"{comment_prefix} File {index}: {path.name} (Size: {size} bytes)\n\n"


def combine_files(
    files: Sequence[Path],
    output_path: Path,
    *,
    include_metadata: bool = True,
    comment_prefix: str = "//",
    encoding: str = "utf-8",
) -> CombineResult:
    """
    Write ``files`` in order into ``output_path``.

    Each file contributes an optional metadata header, its content, and a
    blank line. The output replaces ``output_path`` atomically.
    """
    if not files:
        raise NoMatchingFilesError("No files to combine")

    output_path = Path(output_path)
    bytes_written = 0

    with atomic_write(output_path) as out:
        for index, path in enumerate(files, start=1):
            content = Path(path).read_text(encoding=encoding)
            pieces = []
            if include_metadata:
                pieces.append(metadata_header(index, Path(path), comment_prefix))
            pieces.append(content)
            pieces.append("\n\n")

            data = "".join(pieces).encode(encoding)
            out.write(data)
            bytes_written += len(data)
            log.debug("combine.file", index=index, path=str(path), bytes=len(data))

    log.info(
        "combine.done",
        files=len(files),
        output=str(output_path),
        bytes=bytes_written,
    )
    return CombineResult(
        files_combined=len(files),
        output_path=output_path,
        bytes_written=bytes_written,
    )
