"""JSON manifests of files in a folder tree."""

import json
from pathlib import Path
from typing import Iterable, List

from .core.errors import NoMatchingFilesError
from .core.logging import log
from .core.models import FileEntry
from .scan import find_files
from .split.sink import atomic_write


def list_files(
    root: Path, extensions: Iterable[str], exclude: Iterable[Path] = ()
) -> List[FileEntry]:
    """Manifest entries for every matching file under ``root``, sorted."""
    entries = [
        FileEntry(
            file_path=str(path),
            file_name=path.name,
            extension=path.suffix,
        )
        for path in find_files(root, extensions, exclude=exclude)
    ]
    log.info("list.scanned", root=str(root), files=len(entries))
    return entries


def render_manifest(entries: List[FileEntry]) -> str:
    return json.dumps(
        [entry.model_dump(by_alias=True) for entry in entries],
        indent=2,
        ensure_ascii=False,
    )


def write_manifest(entries: List[FileEntry], output_path: Path) -> str:
    """Write the manifest as indented JSON and return the JSON text."""
    if not entries:
        raise NoMatchingFilesError("No files to list")

    text = render_manifest(entries)
    with atomic_write(Path(output_path)) as out:
        out.write(text.encode("utf-8"))

    log.info("list.written", output=str(output_path), chars=len(text))
    return text
