"""Tests for resource parser utilities."""

from __future__ import annotations

from kubesnap.utils.resource_parser import (
    format_cpu_millicores,
    format_memory_bytes,
    memory_str_to_bytes,
    parse_cpu,
    parse_cpu_millicores,
    parse_memory_bytes,
)


class TestParseCpu:
    """Tests for parse_cpu function."""

    def test_parse_cpu_millicores(self) -> None:
        """Test parsing CPU in millicores."""
        assert parse_cpu("100m") == 0.1
        assert parse_cpu("500m") == 0.5
        assert parse_cpu("1000m") == 1.0

    def test_parse_cpu_micro_and_nano_cores(self) -> None:
        """Test parsing CPU in microcore/nanocore units."""
        assert parse_cpu("500000u") == 0.5
        assert parse_cpu("500000000n") == 0.5

    def test_parse_cpu_decimal(self) -> None:
        assert parse_cpu("1.5") == 1.5
        assert parse_cpu("2") == 2.0

    def test_parse_cpu_empty_and_invalid(self) -> None:
        assert parse_cpu("") == 0.0
        assert parse_cpu(None) == 0.0  # type: ignore
        assert parse_cpu("invalid") == 0.0

    def test_parse_cpu_with_whitespace(self) -> None:
        assert parse_cpu(" 100m ") == 0.1


class TestMemoryStrToBytes:
    """Tests for memory_str_to_bytes function."""

    def test_binary_suffixes(self) -> None:
        assert memory_str_to_bytes("1Ki") == 1024
        assert memory_str_to_bytes("512Mi") == 512 * 1024 * 1024
        assert memory_str_to_bytes("1Gi") == 1024**3
        assert memory_str_to_bytes("1Ti") == 1024**4

    def test_decimal_suffixes(self) -> None:
        """Decimal suffixes must not be confused with binary ones."""
        assert memory_str_to_bytes("1k") == 1000
        assert memory_str_to_bytes("500M") == 500_000_000
        assert memory_str_to_bytes("2G") == 2_000_000_000

    def test_plain_bytes(self) -> None:
        assert memory_str_to_bytes("2048") == 2048

    def test_empty_and_invalid(self) -> None:
        assert memory_str_to_bytes("") == 0.0
        assert memory_str_to_bytes("lots") == 0.0
        assert memory_str_to_bytes("xGi") == 0.0


class TestIntegerParsers:
    """Tests for millicore/byte parsers used by overview aggregation."""

    def test_parse_cpu_millicores(self) -> None:
        assert parse_cpu_millicores("150m") == 150
        assert parse_cpu_millicores("1.5") == 1500
        assert parse_cpu_millicores("2") == 2000
        assert parse_cpu_millicores("") == 0

    def test_parse_cpu_millicores_rounds_up_fractions(self) -> None:
        assert parse_cpu_millicores("1500000n") == 2

    def test_parse_memory_bytes(self) -> None:
        assert parse_memory_bytes("1.5Ki") == 1536
        assert parse_memory_bytes("1Gi") == 1024**3
        assert parse_memory_bytes("bogus") == 0


class TestFormatters:
    """Tests for overview display formatting."""

    def test_format_cpu_zero(self) -> None:
        assert format_cpu_millicores(0) == "0"

    def test_format_cpu_below_one_core(self) -> None:
        assert format_cpu_millicores(250) == "250m"
        assert format_cpu_millicores(999) == "999m"

    def test_format_cpu_whole_cores(self) -> None:
        assert format_cpu_millicores(1000) == "1"
        assert format_cpu_millicores(4000) == "4"

    def test_format_cpu_fractional_cores(self) -> None:
        assert format_cpu_millicores(2500) == "2.50"
        assert format_cpu_millicores(1250) == "1.25"

    def test_format_memory_small(self) -> None:
        assert format_memory_bytes(0) == "0"
        assert format_memory_bytes(512) == "512"

    def test_format_memory_units(self) -> None:
        assert format_memory_bytes(1536) == "1.5Ki"
        assert format_memory_bytes(3 * 1024**2) == "3.0Mi"
        assert format_memory_bytes(2 * 1024**3) == "2.0Gi"
        assert format_memory_bytes(5 * 1024**4) == "5.0Ti"

    def test_format_memory_stays_in_terabytes(self) -> None:
        assert format_memory_bytes(2048 * 1024**4) == "2048.0Ti"

    def test_format_parse_round_trip_for_sum(self) -> None:
        total = parse_memory_bytes("1Gi") + parse_memory_bytes("512Mi")
        assert format_memory_bytes(total) == "1.5Gi"
