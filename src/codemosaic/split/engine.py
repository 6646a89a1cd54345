"""
Partitioning engine: split one file into ordered, numbered parts.

Two strategies, chosen by policy kind:

1. Byte-exact (``ByPartCount``): a fixed number of parts by raw byte length,
   the remainder spread one byte at a time over the first parts.
2. Threshold (``ByThreshold``): line accumulation, closing a part before a
   size or character limit would be exceeded.

The source is streamed once, forward only. Each part is committed atomically
before the next one is started.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from ..core.errors import PartitionCancelled, PartitionIOError
from ..core.logging import log
from .policy import (
    ByPartCount,
    ByThreshold,
    check_encoding,
    describe_policy,
    validate_policy,
)
from .sink import atomic_write, part_path

COPY_CHUNK_SIZE = 1024 * 1024


class Part(NamedTuple):
    """A committed part."""

    number: int
    path: Path
    size: int
    chars: int = 0


class SplitResult(NamedTuple):
    parts: List[Part]

    @property
    def parts_created(self) -> int:
        return len(self.parts)

    @property
    def paths(self) -> List[Path]:
        return [part.path for part in self.parts]


def part_sizes(total: int, n: int) -> Iterator[int]:
    """Byte count of each part when ``total`` bytes are split ``n`` ways.

    Part ``i`` (1-based) gets ``total // n + 1`` bytes when
    ``i <= total % n``, else ``total // n``. Zero-length parts are omitted,
    so an empty source yields no parts and ``total < n`` yields ``total``
    one-byte parts. Sizes are yielded lazily.
    """
    base, remainder = divmod(total, n)
    for i in range(1, min(n, total) + 1):
        yield base + 1 if i <= remainder else base


def accumulate_parts(
    lines: Iterable[str], policy: ByThreshold
) -> Iterator[Tuple[str, int, int]]:
    """Group lines into parts, yielding ``(content, size, chars)``.

    Line terminators are kept and counted. A line that would push the current
    part over either limit starts a new part, unless the current part is still
    empty, in which case the line stays (an oversized line becomes a part on
    its own). Part content has trailing whitespace trimmed. A trailing
    whitespace-only remainder is not emitted.
    """
    buffer: List[str] = []
    size = 0
    chars = 0

    for line in lines:
        added = len(line)

        should_split = False
        if policy.max_bytes is not None and size + added > policy.max_bytes:
            should_split = True
        if policy.max_chars is not None and chars + added > policy.max_chars:
            should_split = True

        if should_split and buffer:
            yield "".join(buffer).rstrip(), size, chars
            buffer = [line]
            size = added
            chars = added
        else:
            buffer.append(line)
            size += added
            chars += added

    remaining = "".join(buffer)
    if remaining.strip():
        yield remaining.rstrip(), size, chars


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise PartitionCancelled("Split cancelled")


def _cancellable(
    lines: Iterable[str], cancel: Optional[threading.Event]
) -> Iterator[str]:
    for line in lines:
        _check_cancel(cancel)
        yield line


def _split_bytes(
    source: Path,
    output_dir: Path,
    base_name: str,
    ext: str,
    policy: ByPartCount,
    cancel: Optional[threading.Event],
    parts: List[Part],
) -> None:
    total = source.stat().st_size
    sizes = part_sizes(total, policy.n)
    log.info(
        "split.bytes.plan",
        source=str(source),
        total_bytes=total,
        parts=policy.n,
        base_size=total // policy.n,
        remainder=total % policy.n,
    )

    with open(source, "rb") as src:
        for number, size in enumerate(sizes, start=1):
            path = part_path(output_dir, base_name, number, ext)
            with atomic_write(path) as out:
                remaining = size
                while remaining:
                    _check_cancel(cancel)
                    chunk = src.read(min(COPY_CHUNK_SIZE, remaining))
                    if not chunk:
                        raise OSError(
                            f"Source {source} ended early while writing part {number}"
                        )
                    out.write(chunk)
                    remaining -= len(chunk)

            parts.append(Part(number=number, path=path, size=size))
            log.info(
                "split.part.written",
                part=number,
                bytes=size,
                path=str(path),
            )


def _split_lines(
    source: Path,
    output_dir: Path,
    base_name: str,
    ext: str,
    policy: ByThreshold,
    encoding: str,
    cancel: Optional[threading.Event],
    parts: List[Part],
) -> None:
    # newline="" keeps "\n", "\r\n" and "\r" exactly as they appear
    with open(source, "r", encoding=encoding, newline="") as src:
        accumulated = accumulate_parts(_cancellable(src, cancel), policy)
        for number, (content, size, chars) in enumerate(accumulated, start=1):
            path = part_path(output_dir, base_name, number, ext)
            with atomic_write(path) as out:
                out.write(content.encode(encoding))

            parts.append(Part(number=number, path=path, size=size, chars=chars))
            log.info(
                "split.part.written",
                part=number,
                size=size,
                chars=chars,
                path=str(path),
            )


def partition(
    source_path: Union[str, Path],
    output_dir: Union[str, Path],
    base_name: str,
    policy: Union[ByPartCount, ByThreshold],
    *,
    encoding: str = "utf-8",
    cancel: Optional[threading.Event] = None,
) -> SplitResult:
    """
    Split ``source_path`` into parts written to ``output_dir``.

    Parts are named ``{base_name}_part{N}{ext}`` where ``ext`` is the source
    extension. ``output_dir`` must already exist.

    Args:
        source_path: File to split
        output_dir: Existing directory receiving the parts
        base_name: Prefix of every part file name
        policy: ``ByPartCount`` or ``ByThreshold``
        encoding: Text encoding for threshold mode (byte mode ignores it)
        cancel: Optional event; once set, the split stops before the next
            part is committed

    Returns:
        SplitResult listing the committed parts in order

    Raises:
        PolicyError: policy is malformed or, in threshold mode, the encoding
            is unknown (nothing is read or written)
        PartitionIOError: source unreadable/undecodable or a write failed
        PartitionCancelled: ``cancel`` was set
    """
    validate_policy(policy)
    if isinstance(policy, ByThreshold):
        check_encoding(encoding)

    source = Path(source_path)
    out_dir = Path(output_dir)
    ext = source.suffix
    parts: List[Part] = []

    log.info(
        "split.start",
        source=str(source),
        output_dir=str(out_dir),
        base_name=base_name,
        mode=describe_policy(policy),
    )

    try:
        if isinstance(policy, ByPartCount):
            _split_bytes(source, out_dir, base_name, ext, policy, cancel, parts)
        else:
            _split_lines(
                source, out_dir, base_name, ext, policy, encoding, cancel, parts
            )
    except PartitionCancelled as e:
        log.warning("split.cancelled", source=str(source), parts_written=len(parts))
        raise PartitionCancelled(str(e), [p.path for p in parts]) from None
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "split.failed",
            source=str(source),
            parts_written=len(parts),
            error=str(e),
        )
        raise PartitionIOError(
            f"Split of {source} failed: {e}", [p.path for p in parts]
        ) from e

    log.info("split.done", source=str(source), parts_created=len(parts))
    return SplitResult(parts=parts)
