"""Resource parsing utilities for CPU and memory values.

Provides functions to parse Kubernetes resource strings into standardized formats
and to format aggregated totals back into the compact strings shown in
cluster overviews:
- CPU: parsed to cores (float) or millicores (int)
- Memory: parsed to bytes
"""

import math

# Module-level constants to avoid re-creating on every function call.
# Binary suffixes are checked before decimal ones ("Mi" before "M").
_MEMORY_BYTES_MULTIPLIERS: tuple[tuple[str, int], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
    ("Pi", 1024**5),
    ("Ei", 1024**6),
    ("k", 1000),
    ("M", 1000**2),
    ("G", 1000**3),
    ("T", 1000**4),
    ("P", 1000**5),
    ("E", 1000**6),
)

_MEMORY_FORMAT_UNITS: tuple[tuple[str, int], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
)


def parse_cpu(cpu_str: str) -> float:
    """Parse CPU string to cores (float).

    Handles various CPU resource formats:
    - Nanocores: "500000000n" -> 0.5 cores
    - Microcores: "500000u" -> 0.5 cores
    - Millicores: "100m" -> 0.1 cores
    - Decimal: "1.5" -> 1.5 cores
    - Integer: "2" -> 2.0 cores

    Args:
        cpu_str: CPU value as string (e.g., "100m", "1.5", "500")

    Returns:
        CPU value in cores as float. Returns 0.0 on parse error or empty string.
    """
    if not cpu_str:
        return 0.0

    cpu_str = str(cpu_str).strip()

    # Handle nanocores (e.g., "500000000n" -> 0.5)
    if cpu_str.endswith("n"):
        try:
            return float(cpu_str[:-1]) / 1_000_000_000
        except ValueError:
            return 0.0

    # Handle microcores (e.g., "500000u" -> 0.5)
    if cpu_str.endswith("u"):
        try:
            return float(cpu_str[:-1]) / 1_000_000
        except ValueError:
            return 0.0

    # Handle millicores (e.g., "100m" -> 0.1)
    if cpu_str.endswith("m"):
        try:
            return float(cpu_str[:-1]) / 1000
        except ValueError:
            return 0.0

    # Handle plain numbers (cores)
    try:
        return float(cpu_str)
    except ValueError:
        return 0.0


def memory_str_to_bytes(memory_str: str) -> float:
    """Convert memory string to bytes.

    Handles binary and decimal memory resource formats:
    - Ki: "1024Ki" -> 1048576 bytes
    - Mi: "512Mi" -> 536870912 bytes
    - Gi: "1Gi" -> 1073741824 bytes
    - M: "500M" -> 500000000 bytes

    Args:
        memory_str: Memory value as string (e.g., "512Mi", "1Gi")

    Returns:
        Memory value in bytes as float. Returns 0.0 on parse error or empty string.
    """
    if not memory_str:
        return 0.0

    memory_str = str(memory_str).strip()

    for suffix, mult in _MEMORY_BYTES_MULTIPLIERS:
        if memory_str.endswith(suffix):
            try:
                value = float(memory_str[: -len(suffix)])
                return value * mult
            except ValueError:
                return 0.0

    # Handle millibytes, which some tooling emits for tiny quantities
    if memory_str.endswith("m"):
        try:
            return float(memory_str[:-1]) / 1000
        except ValueError:
            return 0.0

    # Handle plain bytes
    try:
        return float(memory_str)
    except ValueError:
        return 0.0


def parse_cpu_millicores(cpu_str: str) -> int:
    """Parse a CPU quantity to whole millicores, rounding fractions up."""
    millicores = parse_cpu(cpu_str) * 1000
    # Trim float noise before rounding up ("0.15" * 1000 must stay 150).
    return math.ceil(round(millicores, 6))


def parse_memory_bytes(memory_str: str) -> int:
    """Parse a memory quantity to whole bytes, rounding fractions up."""
    return math.ceil(round(memory_str_to_bytes(memory_str), 6))


def format_cpu_millicores(millicores: int) -> str:
    """Format millicores the way cluster overview cards display them.

    Examples:
        0 -> "0", 250 -> "250m", 2000 -> "2", 2500 -> "2.50"
    """
    if millicores == 0:
        return "0"
    if millicores < 1000:
        return f"{millicores}m"
    cores = millicores / 1000
    if cores == int(cores):
        return f"{cores:.0f}"
    return f"{cores:.2f}"


def format_memory_bytes(num_bytes: int) -> str:
    """Format bytes with one decimal and the largest fitting binary unit.

    Examples:
        0 -> "0", 512 -> "512", 1536 -> "1.5Ki", 2147483648 -> "2.0Gi"
    """
    if num_bytes == 0:
        return "0"
    if num_bytes < 1024:
        return str(num_bytes)
    for index, (suffix, size) in enumerate(_MEMORY_FORMAT_UNITS):
        is_last = index == len(_MEMORY_FORMAT_UNITS) - 1
        if is_last or num_bytes < _MEMORY_FORMAT_UNITS[index + 1][1]:
            return f"{num_bytes / size:.1f}{suffix}"
    return str(num_bytes)
