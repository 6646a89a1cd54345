"""Extension-filtered discovery of files in a folder tree."""

from pathlib import Path
from typing import Iterable, List


def normalize_extension(ext: str) -> str:
    """Trim ``ext`` and add a leading dot if missing."""
    ext = ext.strip()
    if not ext:
        raise ValueError("Extension must not be empty")
    if not ext.startswith("."):
        ext = "." + ext
    return ext


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Normalize and de-duplicate (case-insensitively) keeping first order."""
    seen = set()
    result = []
    for ext in extensions:
        normalized = normalize_extension(ext)
        key = normalized.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(normalized)
    return result


def find_files(
    root: Path, extensions: Iterable[str], exclude: Iterable[Path] = ()
) -> List[Path]:
    """Recursively find files under ``root`` ending with any extension.

    Matching is a case-insensitive suffix test on the file name. Results are
    sorted by path string; paths in ``exclude`` are skipped.
    """
    suffixes = tuple(ext.lower() for ext in normalize_extensions(extensions))
    excluded = {Path(p).resolve() for p in exclude}

    files = []
    for path in Path(root).rglob("*"):
        if not path.is_file():
            continue
        if not path.name.lower().endswith(suffixes):
            continue
        if path.resolve() in excluded:
            continue
        files.append(path)

    return sorted(files, key=str)
