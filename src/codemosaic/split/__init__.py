"""
File partitioning for CodeMosaic.

This package provides:
- Byte-exact splitting into a fixed number of parts (binary-safe)
- Line-based splitting by size and/or character thresholds
- Atomic part writes (temp file then rename)
"""

from .engine import Part, SplitResult, accumulate_parts, part_sizes, partition
from .policy import (
    ByPartCount,
    ByThreshold,
    SplitPolicy,
    check_encoding,
    describe_policy,
    policy_from_options,
    validate_policy,
)
from .sink import atomic_write, part_path

__all__ = [
    "ByPartCount",
    "ByThreshold",
    "Part",
    "SplitPolicy",
    "SplitResult",
    "accumulate_parts",
    "atomic_write",
    "check_encoding",
    "describe_policy",
    "part_path",
    "part_sizes",
    "partition",
    "policy_from_options",
    "validate_policy",
]
