"""
RaptorQ Parameter Derivation Formulas

Pure functions relating data length, symbol size, sub-blocking and decoder
memory:

    Kt      = ceil(F / T)                          total source symbols
    SSz(n)  = Al * ceil(T / (Al * n))              sub-symbol size for n sub-blocks
    KL(n)   = floor'(min(K_max, WS / SSz(n)))      largest K' fitting in WS
    N_max   = floor(T / (SS * Al))                 top interleaver degree

where floor' rounds down to a supported systematic block size (K').

Partition[I, J] splits I items into J nearly equal groups:
    IL = ceil(I / J), IS = floor(I / J), JL = I - IS * J, JS = J - JL

Reference: RFC 6330 Sections 4.3 and 4.4.1.2
"""

from typing import NamedTuple

from .Errors import InvalidParameterError
from .ExtraMath import ceil_div
from .SchemeBounds import SchemeBounds, RFC6330
from .SystematicSizes import ceil_to_systematic, floor_to_systematic


class Partition(NamedTuple):
    """
    Result of Partition[I, J].

    Attributes:
        il: Size of the larger groups
        is_: Size of the smaller groups
        jl: Number of larger groups
        js: Number of smaller groups
    """
    il: int
    is_: int
    jl: int
    js: int


def total_symbols(data_length: int, symbol_size: int) -> int:
    """
    Total number of source symbols Kt = ceil(F / T).

    F and T must already be within their bounds; the result is not
    checked against Kt_max.
    """
    return ceil_div(data_length, symbol_size)


def possible_total_symbols(data_length: int, symbol_size: int) -> int:
    """
    Kt for arbitrary F and T, used to test Kt against its bound.

    Python integers do not overflow, so this is the same quantity as
    total_symbols(); it exists to mark the call sites where the result is
    not yet known to be bounded.
    """
    return ceil_div(data_length, symbol_size)


def sub_symbol_size(symbol_size: int, alignment: int, n: int) -> int:
    """
    Size of one sub-symbol when a symbol is split into n sub-blocks.

    Args:
        symbol_size: Symbol size T
        alignment: Symbol alignment Al
        n: Number of sub-blocks (>= 1)

    Returns:
        Al * ceil(T / (Al * n)), a multiple of Al
    """
    if n < 1:
        raise ValueError(f"Number of sub-blocks must be positive, got {n}")
    return alignment * ceil_div(symbol_size, alignment * n)


def min_working_memory(k: int, symbol_size: int, alignment: int, n: int) -> int:
    """
    Decoder memory needed for a source block of k symbols.

    k is first rounded up to a supported K', then multiplied by the
    sub-symbol size for n sub-blocks.
    """
    return ceil_to_systematic(k) * sub_symbol_size(symbol_size, alignment, n)


def max_source_symbols_for_memory(max_memory: int, symbol_size: int, alignment: int, n: int,
                                  bounds: SchemeBounds = RFC6330) -> int:
    """
    KL(n): the largest supported K' whose sub-blocks fit in max_memory.

    Args:
        max_memory: Decoder working memory budget WS (octets)
        symbol_size: Symbol size T
        alignment: Symbol alignment Al
        n: Number of sub-blocks

    Returns:
        floor'(min(K_max, WS // SSz(n)))
    """
    upper = min(bounds.k_max, max_memory // sub_symbol_size(symbol_size, alignment, n))
    return floor_to_systematic(upper)


def top_interleaver_degree(symbol_size: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Largest number of sub-blocks worth considering for a symbol size.

    Sub-blocks are not allowed to shrink below SS * Al octets, which gives
    floor(T / (SS * Al)). The result is clamped to [N_min, N_max] so that
    small symbols still use a single sub-block.
    """
    degree = symbol_size // (bounds.ss * bounds.al)
    return max(bounds.n_min, min(bounds.n_max, degree))


def partition(items: int, groups: int) -> Partition:
    """
    Partition[I, J]: split `items` into `groups` nearly equal parts.

    Args:
        items: Number of items I
        groups: Number of groups J (> 0)

    Returns:
        Partition(IL, IS, JL, JS) with IL*JL + IS*JS == I
    """
    if groups <= 0:
        raise ValueError(f"Number of groups must be positive, got {groups}")
    il = ceil_div(items, groups)
    is_ = items // groups
    jl = items - is_ * groups
    js = groups - jl
    return Partition(il, is_, jl, js)


def source_block_partition(total: int, num_source_blocks: int) -> Partition:
    """
    Split Kt symbols into Z source blocks.

    Returns:
        Partition(KL, KS, ZL, ZS): ZL blocks of KL symbols followed by
        ZS blocks of KS symbols
    """
    return partition(total, num_source_blocks)


def sub_block_partition(symbol_size: int, alignment: int, interleaver_length: int) -> Partition:
    """
    Split a symbol of T octets into N sub-symbols, in units of Al.

    Returns:
        Partition(TL, TS, NL, NS) in units of Al octets

    Raises:
        InvalidParameterError: If T is not a multiple of Al
    """
    if symbol_size % alignment:
        raise InvalidParameterError(
            f"symbol size T={symbol_size} is not a multiple of Al={alignment}", 'T')
    return partition(symbol_size // alignment, interleaver_length)
