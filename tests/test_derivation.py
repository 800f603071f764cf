"""
Tests for systematic block sizes and the derivation formulas.
"""

import pytest
import numpy as np
from rqoti.SystematicSizes import (
    K_PRIME, K_PRIME_MIN, K_PRIME_MAX,
    floor_to_systematic, ceil_to_systematic, is_systematic, systematic_index,
)
from rqoti.ExtraMath import ceil_div, check_width
from rqoti.Derivation import (
    total_symbols, possible_total_symbols, sub_symbol_size, min_working_memory,
    max_source_symbols_for_memory, top_interleaver_degree,
    partition, source_block_partition, sub_block_partition,
)
from rqoti.Errors import InvalidParameterError
from rqoti.SchemeBounds import SchemeBounds, RFC6330


class TestSystematicSizes:
    """Test the K' table and rounding queries."""

    def test_table_ends(self):
        """Table starts at 10 and ends at K_max."""
        assert K_PRIME_MIN == 10
        assert K_PRIME_MAX == RFC6330.k_max

    def test_table_matches_rfc(self):
        """Table has the 477 rows of RFC 6330 Table 2."""
        assert len(K_PRIME) == 477
        for k in (324, 337, 341, 10241, 12857, 13002, 13143, 13284, 55843):
            assert is_systematic(k)
        for k in (336, 12992, 13124):
            assert not is_systematic(k)

    def test_rounding_near_table_rows(self):
        """Rounding lands on the neighbouring table rows."""
        assert ceil_to_systematic(337) == 337
        assert ceil_to_systematic(325) == 337
        assert floor_to_systematic(340) == 337
        assert floor_to_systematic(13002) == 13002
        assert floor_to_systematic(13142) == 13002
        assert ceil_to_systematic(13003) == 13143
        assert ceil_to_systematic(55844) == 56403

    def test_strictly_increasing(self):
        """K' values are strictly increasing."""
        assert np.all(np.diff(K_PRIME) > 0)

    def test_floor_exact_and_between(self):
        """Floor returns the value itself or the next lower entry."""
        assert floor_to_systematic(10) == 10
        assert floor_to_systematic(11) == 10
        assert floor_to_systematic(12) == 12
        assert floor_to_systematic(100) == 97
        assert floor_to_systematic(1000) == 989

    def test_ceil_exact_and_between(self):
        """Ceil returns the value itself or the next higher entry."""
        assert ceil_to_systematic(10) == 10
        assert ceil_to_systematic(11) == 12
        assert ceil_to_systematic(28) == 30
        assert ceil_to_systematic(39) == 42
        assert ceil_to_systematic(977) == 977

    def test_clamped_below_table(self):
        """Inputs below the table map to the first entry."""
        for k in (0, 1, 9):
            assert floor_to_systematic(k) == 10
            assert ceil_to_systematic(k) == 10

    def test_clamped_above_table(self):
        """Inputs above the table map to the last entry."""
        for k in (56403, 56404, 10**9):
            assert floor_to_systematic(k) == 56403
            assert ceil_to_systematic(k) == 56403

    def test_floor_ceil_bracket(self):
        """floor(k) <= k <= ceil(k) inside the table range."""
        for k in range(10, 2000):
            assert floor_to_systematic(k) <= k <= ceil_to_systematic(k)
            assert is_systematic(floor_to_systematic(k))
            assert is_systematic(ceil_to_systematic(k))

    def test_is_systematic(self):
        """Membership test."""
        assert is_systematic(49)
        assert not is_systematic(50)
        assert not is_systematic(0)
        assert not is_systematic(56404)

    def test_systematic_index(self):
        """Index of table entries."""
        assert systematic_index(10) == 0
        assert systematic_index(12) == 1
        assert systematic_index(56403) == len(K_PRIME) - 1

        with pytest.raises(ValueError):
            systematic_index(11)


class TestExtraMath:
    """Test integer helpers."""

    @pytest.mark.parametrize("num,den,expected", [
        (0, 5, 0),
        (1, 5, 1),
        (10, 5, 2),
        (11, 5, 3),
        (2**40 - 1, 4, 2**38),
    ])
    def test_ceil_div(self, num, den, expected):
        """Ceiling division."""
        assert ceil_div(num, den) == expected

    def test_ceil_div_zero_divisor(self):
        """Division by zero is rejected."""
        with pytest.raises(ZeroDivisionError):
            ceil_div(10, 0)

    def test_check_width(self):
        """Values must fit their field."""
        assert check_width(255, 8, 'Z') == 255

        with pytest.raises(InvalidParameterError) as exc:
            check_width(256, 8, 'Z')
        assert exc.value.parameter == 'Z'

        with pytest.raises(InvalidParameterError):
            check_width(-1, 8, 'Z')


class TestFormulas:
    """Test the derivation formulas."""

    @pytest.mark.parametrize("F,T", [
        (1, 4), (4, 4), (5, 4), (1023, 1024), (1024, 1024), (1025, 1024),
        (1_000_000, 1024), (3 * 65532, 65532), (RFC6330.f_max, 65532),
    ])
    def test_total_symbols(self, F, T):
        """Kt is exactly ceil(F / T), including F = k*T."""
        expected = F // T + (1 if F % T else 0)
        assert total_symbols(F, T) == expected
        assert possible_total_symbols(F, T) == expected

    def test_total_symbols_multiple(self):
        """Exact multiples give no extra symbol."""
        for k in (1, 7, 977, 56403):
            assert total_symbols(k * 1024, 1024) == k

    def test_sub_symbol_size(self):
        """Sub-symbol size is an upper multiple of Al."""
        assert sub_symbol_size(1024, 4, 1) == 1024
        assert sub_symbol_size(1024, 4, 32) == 32
        assert sub_symbol_size(1000, 4, 3) == 336
        assert sub_symbol_size(4, 4, 1) == 4

        for n in range(1, 50):
            size = sub_symbol_size(1400, 4, n)
            assert size % 4 == 0
            assert size * n >= 1400

    def test_sub_symbol_size_zero_blocks(self):
        """Zero sub-blocks is rejected."""
        with pytest.raises(ValueError):
            sub_symbol_size(1024, 4, 0)

    def test_min_working_memory(self):
        """K is rounded up to K' before multiplying."""
        assert min_working_memory(11, 1024, 4, 1) == 12 * 1024
        assert min_working_memory(12, 1024, 4, 1) == 12 * 1024
        assert min_working_memory(10, 1024, 4, 32) == 10 * 32
        assert min_working_memory(337, 1024, 4, 1) == 337 * 1024

    def test_max_source_symbols_for_memory(self):
        """KL(n) rounds the fitting count down to K'."""
        assert max_source_symbols_for_memory(12 * 1024, 1024, 4, 1) == 12
        assert max_source_symbols_for_memory(12 * 1024 - 1, 1024, 4, 1) == 10
        assert max_source_symbols_for_memory(3200, 1024, 4, 32) == 97
        assert max_source_symbols_for_memory(10**12, 1024, 4, 1) == RFC6330.k_max

    def test_memory_formulas_agree(self):
        """A block of KL(n) symbols fits in the memory it was computed from."""
        for ws in (320, 1000, 5000, 32000, 100_000):
            KL = max_source_symbols_for_memory(ws, 1024, 4, 32)
            if KL > 10:
                assert min_working_memory(KL, 1024, 4, 32) <= ws

    @pytest.mark.parametrize("T,expected", [
        (4, 1), (31, 1), (32, 1), (63, 1), (64, 2), (1024, 32), (1400, 43), (65532, 2047),
    ])
    def test_top_interleaver_degree(self, T, expected):
        """N_max = floor(T / (SS * Al)), at least 1."""
        assert top_interleaver_degree(T) == expected

    def test_top_interleaver_degree_uses_bounds(self):
        """SS and N_max come from the bounds configuration."""
        assert top_interleaver_degree(1024, SchemeBounds(ss=1)) == 256
        assert top_interleaver_degree(1024, SchemeBounds(ss=1, n_max=100)) == 100

    def test_top_interleaver_degree_not_constant(self):
        """Interleaving degree grows with the symbol size."""
        degrees = [top_interleaver_degree(T) for T in range(4, 65533, 4)]
        assert degrees == sorted(degrees)
        assert degrees[-1] > 1


class TestPartition:
    """Test Partition[I, J]."""

    @pytest.mark.parametrize("items,groups", [
        (10, 3), (9, 3), (1, 1), (977, 3), (9766, 10), (256, 7),
    ])
    def test_partition_covers_items(self, items, groups):
        """Groups add up to the items and differ by at most one."""
        il, is_, jl, js = partition(items, groups)
        assert il * jl + is_ * js == items
        assert jl + js == groups
        assert il - is_ in (0, 1)

    def test_partition_values(self):
        """Known partitions."""
        assert partition(10, 3) == (4, 3, 1, 2)
        assert partition(9, 3) == (3, 3, 0, 3)

    def test_partition_zero_groups(self):
        """Zero groups is rejected."""
        with pytest.raises(ValueError):
            partition(10, 0)

    def test_source_block_partition(self):
        """977 symbols in 3 blocks."""
        assert source_block_partition(977, 3) == (326, 325, 2, 1)

    def test_sub_block_partition(self):
        """A 1024-byte symbol is 256 units of Al=4."""
        assert sub_block_partition(1024, 4, 3) == (86, 85, 1, 2)
        assert sub_block_partition(1024, 4, 1) == (256, 256, 0, 1)

    def test_sub_block_partition_unaligned(self):
        """Symbols that are not a whole number of Al units are rejected."""
        with pytest.raises(InvalidParameterError) as exc:
            sub_block_partition(1026, 4, 3)
        assert exc.value.parameter == 'T'
