"""
Split policies: a tagged union of byte-exact and threshold partitioning.
"""

from __future__ import annotations

import codecs
import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import PolicyError

BYTES_PER_MB = 1024 * 1024


class ByPartCount(BaseModel):
    """Split into exactly ``n`` parts by raw byte count (binary-safe)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["parts"] = "parts"
    n: int


class ByThreshold(BaseModel):
    """Line-oriented split closing a part before a limit would be exceeded.

    ``combine`` never changes when a split triggers; either configured
    threshold already triggers one on its own. It only marks the mode as
    combined for reporting.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["threshold"] = "threshold"
    max_bytes: Optional[float] = None
    max_chars: Optional[int] = None
    combine: bool = False

    @property
    def is_combined(self) -> bool:
        return (
            self.combine
            and self.max_bytes is not None
            and self.max_chars is not None
        )


SplitPolicy = Annotated[
    Union[ByPartCount, ByThreshold], Field(discriminator="kind")
]


def check_encoding(encoding: str) -> str:
    """Return the canonical codec name, or raise PolicyError if unknown."""
    try:
        return codecs.lookup(encoding).name
    except LookupError as e:
        raise PolicyError(f"Unknown text encoding: {encoding}") from e


def validate_policy(
    policy: Union[ByPartCount, ByThreshold],
) -> Union[ByPartCount, ByThreshold]:
    """Raise PolicyError if the policy cannot drive a split."""
    if isinstance(policy, ByPartCount):
        if policy.n <= 0:
            raise PolicyError(f"Part count must be positive, got {policy.n}")
        return policy

    if isinstance(policy, ByThreshold):
        if policy.max_bytes is None and policy.max_chars is None:
            raise PolicyError(
                "Threshold policy needs max_bytes, max_chars, or both"
            )
        if policy.max_bytes is not None and not math.isfinite(policy.max_bytes):
            raise PolicyError(
                f"max_bytes must be a finite number, got {policy.max_bytes}"
            )
        if policy.max_bytes is not None and policy.max_bytes <= 0:
            raise PolicyError(
                f"max_bytes must be positive, got {policy.max_bytes}"
            )
        if policy.max_chars is not None and policy.max_chars <= 0:
            raise PolicyError(
                f"max_chars must be positive, got {policy.max_chars}"
            )
        return policy

    raise PolicyError(f"Unknown split policy: {policy!r}")


def policy_from_options(
    parts: Optional[int] = None,
    max_size_mb: Optional[float] = None,
    max_chars: Optional[int] = None,
    combine: bool = False,
    default_parts: int = 2,
) -> Union[ByPartCount, ByThreshold]:
    """Translate user-facing options into a validated policy.

    Part count and thresholds are mutually exclusive. With no option given,
    ``default_parts`` is used.
    """
    has_threshold = max_size_mb is not None or max_chars is not None
    if parts is not None and has_threshold:
        raise PolicyError(
            "Part count cannot be combined with size or character thresholds"
        )
    if combine and not (max_size_mb is not None and max_chars is not None):
        raise PolicyError(
            "Combined mode requires both a size and a character threshold"
        )

    if has_threshold:
        max_bytes = max_size_mb * BYTES_PER_MB if max_size_mb is not None else None
        return validate_policy(
            ByThreshold(max_bytes=max_bytes, max_chars=max_chars, combine=combine)
        )

    return validate_policy(
        ByPartCount(n=parts if parts is not None else default_parts)
    )


def describe_policy(policy: Union[ByPartCount, ByThreshold]) -> str:
    """Short human description used in logs and CLI output."""
    if isinstance(policy, ByPartCount):
        return f"By {policy.n} parts"

    limits = []
    if policy.max_bytes is not None:
        limits.append(f"size {policy.max_bytes / BYTES_PER_MB:g} MB")
    if policy.max_chars is not None:
        limits.append(f"{policy.max_chars} chars")
    label = "Combined" if policy.is_combined else "By threshold"
    return f"{label} ({', '.join(limits)})"
