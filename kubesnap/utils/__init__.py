"""Utility functions for kubesnap."""

from kubesnap.utils.checksum import checksum_payload, fnv1a32
from kubesnap.utils.resource_parser import (
    format_cpu_millicores,
    format_memory_bytes,
    parse_cpu_millicores,
    parse_memory_bytes,
)

__all__ = [
    # Checksums
    "checksum_payload",
    "fnv1a32",
    # Resource quantities
    "format_cpu_millicores",
    "format_memory_bytes",
    "parse_cpu_millicores",
    "parse_memory_bytes",
]
