"""
Per-file statistics: general text metrics plus a few type-specific ones.
"""

import codecs
import json
import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from lxml import etree

from .core.errors import UnsupportedFileTypeError
from .core.logging import log
from .core.models import FileStats, GeneralStats, StatItem

COMMENT_RE = re.compile(r"^\s*//|/\*.*?\*/")
WORDS_PER_MINUTE = 200.0
WORDS_PER_SENTENCE = 5.0

# Longest BOMs first so UTF-32 LE is not mistaken for UTF-16 LE
_BOMS: List[Tuple[bytes, str, str]] = [
    (codecs.BOM_UTF32_LE, "utf-32", "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32", "utf-32BE"),
    (codecs.BOM_UTF8, "utf-8-sig", "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16", "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16", "utf-16BE"),
]


def detect_encoding(path: Path) -> Tuple[str, str]:
    """Return ``(codec, display_name)`` from the byte order mark, if any."""
    with open(path, "rb") as f:
        head = f.read(4)
    for bom, codec, name in _BOMS:
        if head.startswith(bom):
            return codec, name
    return "utf-8", "utf-8"


def compute_general_stats(path: Path) -> GeneralStats:
    """Line, word and character metrics for a text file."""
    path = Path(path)
    codec, encoding_name = detect_encoding(path)

    line_count = 0
    non_empty = 0
    empty = 0
    comments = 0
    char_count = 0
    word_count = 0
    unique_words = set()
    longest = 0
    shortest: Optional[int] = None

    with open(path, "r", encoding=codec) as f:
        for raw in f:
            line = raw.rstrip("\n")
            length = len(line)
            line_count += 1
            char_count += length

            if not line.strip():
                empty += 1
            else:
                non_empty += 1
                if COMMENT_RE.search(line):
                    comments += 1
                words = line.split()
                word_count += len(words)
                unique_words.update(word.lower() for word in words)

            longest = max(longest, length)
            if length > 0:
                shortest = length if shortest is None else min(shortest, length)

    stats = GeneralStats(
        line_count=line_count,
        non_empty_line_count=non_empty,
        empty_line_count=empty,
        comment_count=comments,
        char_count=char_count,
        word_count=word_count,
        unique_word_count=len(unique_words),
        longest_line_length=longest,
        shortest_line_length=shortest or 0,
        avg_line_length=char_count / line_count if line_count else 0.0,
        file_size_kb=path.stat().st_size / 1024.0,
        encoding=encoding_name,
        reading_time_min=word_count / WORDS_PER_MINUTE,
    )
    log.debug(
        "count.general",
        path=str(path),
        lines=line_count,
        chars=char_count,
        words=word_count,
        unique_words=stats.unique_word_count,
        comments=comments,
    )
    return stats


def _traverse_json(value: Any, depth: int, totals: dict) -> None:
    depth += 1
    totals["depth"] = max(totals["depth"], depth)
    if isinstance(value, dict):
        for child in value.values():
            totals["keys"] += 1
            _traverse_json(child, depth, totals)
    elif isinstance(value, list):
        for child in value:
            _traverse_json(child, depth, totals)
    else:
        totals["values"] += 1


def analyze_json(path: Path, codec: str = "utf-8") -> Tuple[int, int, int]:
    """Return ``(keys, scalar values, max depth)``. Raises ValueError if invalid."""
    document = json.loads(Path(path).read_text(encoding=codec))
    totals = {"keys": 0, "values": 0, "depth": 0}
    _traverse_json(document, 0, totals)
    return totals["keys"], totals["values"], totals["depth"]


def _json_items(path: Path) -> List[StatItem]:
    codec, _ = detect_encoding(path)
    try:
        keys, values, depth = analyze_json(path, codec)
    except ValueError as e:
        log.warning("count.json.invalid", path=str(path), error=str(e))
        return [
            StatItem(
                metric="JSON Analysis",
                value="Invalid",
                description="JSON syntax error; general stats only.",
            )
        ]
    return [
        StatItem(metric="JSON Keys", value=str(keys), description="Total keys in the document."),
        StatItem(metric="JSON Values", value=str(values), description="Total scalar values."),
        StatItem(metric="Max Depth", value=str(depth), description="Deepest nested level."),
        StatItem(metric="Validity", value="Valid", description="JSON syntax check."),
    ]


def _xml_items(path: Path) -> List[StatItem]:
    try:
        tree = etree.parse(str(path))
    except etree.XMLSyntaxError as e:
        log.warning("count.xml.invalid", path=str(path), error=str(e))
        return [
            StatItem(
                metric="XML Analysis",
                value="N/A",
                description="Error parsing XML; general stats only.",
            )
        ]
    tags = len(tree.xpath("//*"))
    attributes = len(tree.xpath("//@*"))
    return [
        StatItem(metric="XML Tags", value=str(tags), description="Total element tags."),
        StatItem(metric="XML Attributes", value=str(attributes), description="Total attributes."),
    ]


def _txt_items(general: GeneralStats) -> List[StatItem]:
    density = general.word_count / general.line_count if general.line_count else 0.0
    sentences = general.word_count / WORDS_PER_SENTENCE
    return [
        StatItem(metric="Word Density", value=f"{density:.1f} words/line", description="Average words per line."),
        StatItem(metric="Sentences", value=f"{sentences:.0f}", description="Approximate sentence count."),
    ]


def file_specific_stats(path: Path, general: GeneralStats) -> List[StatItem]:
    extension = Path(path).suffix.lower()
    if extension == ".json":
        return _json_items(path)
    if extension == ".xml":
        return _xml_items(path)
    if extension == ".txt":
        return _txt_items(general)
    return [
        StatItem(
            metric="File Type",
            value=extension.upper() or "(none)",
            description="No specific stats available.",
        )
    ]


def general_items(general: GeneralStats) -> List[StatItem]:
    """Render general stats as display rows."""
    return [
        StatItem(metric="Total Lines", value=str(general.line_count), description="Total number of lines in the file."),
        StatItem(metric="Non-Empty Lines", value=str(general.non_empty_line_count), description="Lines with content (excluding blank)."),
        StatItem(metric="Empty Lines", value=str(general.empty_line_count), description="Blank or whitespace-only lines."),
        StatItem(metric="Comment Lines", value=str(general.comment_count), description="Lines starting with // or holding /* */."),
        StatItem(metric="Total Characters", value=str(general.char_count), description="Characters excluding line terminators."),
        StatItem(metric="Total Words", value=str(general.word_count), description="Whitespace-separated words."),
        StatItem(metric="Unique Words", value=str(general.unique_word_count), description="Distinct words, case-insensitive."),
        StatItem(metric="Longest Line", value=str(general.longest_line_length), description="Length of the longest line (chars)."),
        StatItem(metric="Shortest Line", value=str(general.shortest_line_length), description="Length of the shortest non-empty line (chars)."),
        StatItem(metric="Average Line Length", value=f"{general.avg_line_length:.2f}", description="Average characters per line."),
        StatItem(metric="File Size", value=f"{general.file_size_kb:.2f} KB", description="File size in kilobytes."),
        StatItem(metric="Encoding", value=general.encoding, description="Detected from the byte order mark (default UTF-8)."),
        StatItem(metric="Estimated Reading Time", value=f"{general.reading_time_min:.1f} min", description="At 200 words per minute."),
    ]


def count_file(path: Path, supported: Iterable[str] = (".txt", ".cs", ".xml", ".json")) -> FileStats:
    """Compute general and type-specific statistics for ``path``."""
    path = Path(path)
    extension = path.suffix.lower()
    if extension not in {ext.lower() for ext in supported}:
        raise UnsupportedFileTypeError(
            f"File type {extension or '(none)'} is not supported for counting"
        )

    general = compute_general_stats(path)
    specific = file_specific_stats(path, general)
    log.info(
        "count.done",
        path=str(path),
        lines=general.line_count,
        chars=general.char_count,
        words=general.word_count,
    )
    return FileStats(path=path, extension=extension, general=general, specific=specific)
