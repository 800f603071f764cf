"""
RaptorQ Parameter Bounds Checker

Stateless bounds and legality predicates for the FEC parameters:

    F   data length (octets)              T   symbol size (octets)
    Z   number of source blocks           N   interleaver length (sub-blocks)
    Al  symbol alignment                  P   payload length (octets)
    WS  decoder working memory (octets)   K   source symbols per block
    SBN source block number               ESI encoding symbol ID

Three families of functions:
    - min_x() / max_x() / is_x_out_of_bounds(value): absolute bounds, never raise
    - x_given(...): bounds that depend on an already fixed parameter; these
      raise InvalidParameterError if their own inputs are out of bounds
    - parameters_violation() / deriver_violation(): composite legality checks
      returning the first violated constraint as an InvalidParameterError
      (not raised), or None; are_valid_*() are their boolean forms

Every conditional bound has an unchecked twin (leading underscore) for
callers that have already validated its inputs.

Reference: RFC 6330 Section 4.3
"""

from typing import Optional

from .Derivation import (
    min_working_memory,
    max_source_symbols_for_memory,
    possible_total_symbols,
    top_interleaver_degree,
    total_symbols,
)
from .Errors import InvalidParameterError
from .ExtraMath import ceil_div
from .SchemeBounds import SchemeBounds, RFC6330


def _out_of_bounds(name: str, label: str, value: int, low: int, high: int) -> InvalidParameterError:
    return InvalidParameterError(
        f"{label} {name}={value} is out of bounds [{low}, {high}]", name)


def _outside(value: int, low: int, high: int) -> bool:
    return not low <= value <= high


def _unaligned(name: str, label: str, value: int, alignment: int) -> InvalidParameterError:
    return InvalidParameterError(
        f"{label} {name}={value} is not a multiple of the symbol alignment Al={alignment}", name)


# Data length (F) -------------------------------------------------------------

def min_data_length(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.f_min


def max_data_length(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.f_max


def is_data_length_out_of_bounds(data_length: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(data_length, bounds.f_min, bounds.f_max)


def max_data_length_given(symbol_size: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Largest data length that symbols of size T can cover.

    Returns:
        min(F_max, T * Kt_max)

    Raises:
        InvalidParameterError: If T is out of bounds
    """
    _check_symbol_size(symbol_size, bounds)
    return _max_data_length_given(symbol_size, bounds)


def _max_data_length_given(symbol_size: int, bounds: SchemeBounds) -> int:
    return min(bounds.f_max, symbol_size * bounds.kt_max)


# Symbol size (T) -------------------------------------------------------------

def min_symbol_size(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.t_min


def max_symbol_size(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.t_max


def is_symbol_size_out_of_bounds(symbol_size: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(symbol_size, bounds.t_min, bounds.t_max)


def min_symbol_size_given(data_length: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Smallest symbol size keeping Kt within Kt_max for data length F.

    Returns:
        max(T_min, ceil(F / Kt_max))

    Raises:
        InvalidParameterError: If F is out of bounds
    """
    _check_data_length(data_length, bounds)
    return _min_symbol_size_given(data_length, bounds)


def _min_symbol_size_given(data_length: int, bounds: SchemeBounds) -> int:
    return max(bounds.t_min, ceil_div(data_length, bounds.kt_max))


# Number of source blocks (Z) ---------------------------------------------------

def min_num_source_blocks(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.z_min


def max_num_source_blocks(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.z_max


def is_num_source_blocks_out_of_bounds(num_source_blocks: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(num_source_blocks, bounds.z_min, bounds.z_max)


def min_source_blocks_given(total: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Fewest source blocks such that no block exceeds K_max symbols.

    Args:
        total: Total number of symbols Kt (1 to Kt_max)

    Returns:
        max(Z_min, ceil(Kt / K_max))

    Raises:
        InvalidParameterError: If Kt is out of bounds
    """
    _check_total_symbols(total, bounds)
    return _min_source_blocks_given(total, bounds)


def _min_source_blocks_given(total: int, bounds: SchemeBounds) -> int:
    return max(bounds.z_min, ceil_div(total, bounds.k_max))


def max_source_blocks_given(total: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Most source blocks allowed for Kt symbols (every block needs a symbol).

    Returns:
        min(Z_max, Kt)

    Raises:
        InvalidParameterError: If Kt is out of bounds
    """
    _check_total_symbols(total, bounds)
    return _max_source_blocks_given(total, bounds)


def _max_source_blocks_given(total: int, bounds: SchemeBounds) -> int:
    return min(bounds.z_max, total)


# Interleaver length (N) --------------------------------------------------------

def min_interleaver_length(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.n_min


def max_interleaver_length(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.n_max


def is_interleaver_length_out_of_bounds(interleaver_length: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(interleaver_length, bounds.n_min, bounds.n_max)


def max_interleaver_length_given(symbol_size: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Most sub-blocks a symbol of size T can be split into.

    Returns:
        min(N_max, T // Al)

    Raises:
        InvalidParameterError: If T is out of bounds
    """
    _check_symbol_size(symbol_size, bounds)
    return _max_interleaver_length_given(symbol_size, bounds)


def _max_interleaver_length_given(symbol_size: int, bounds: SchemeBounds) -> int:
    return min(bounds.n_max, symbol_size // bounds.al)


# Symbol alignment (Al) ---------------------------------------------------------

def symbol_alignment(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.al


# Composite check ---------------------------------------------------------------

def parameters_violation(data_length: int, symbol_size: int, num_source_blocks: int,
                         interleaver_length: int,
                         bounds: SchemeBounds = RFC6330) -> Optional[InvalidParameterError]:
    """
    Find the first constraint violated by (F, T, Z, N).

    Checks, in order: the absolute bounds of F, T, Z and N; T a multiple
    of Al; Kt <= Kt_max;
    Z within [min_source_blocks_given(Kt), max_source_blocks_given(Kt)];
    N <= max_interleaver_length_given(T).

    Returns:
        InvalidParameterError describing the violation (not raised), or
        None if the parameters are valid
    """
    F, T, Z, N = data_length, symbol_size, num_source_blocks, interleaver_length

    if is_data_length_out_of_bounds(F, bounds):
        return _out_of_bounds('F', "data length", F, bounds.f_min, bounds.f_max)
    if is_symbol_size_out_of_bounds(T, bounds):
        return _out_of_bounds('T', "symbol size", T, bounds.t_min, bounds.t_max)
    if is_num_source_blocks_out_of_bounds(Z, bounds):
        return _out_of_bounds('Z', "number of source blocks", Z, bounds.z_min, bounds.z_max)
    if is_interleaver_length_out_of_bounds(N, bounds):
        return _out_of_bounds('N', "interleaver length", N, bounds.n_min, bounds.n_max)
    if T % bounds.al:
        return _unaligned('T', "symbol size", T, bounds.al)

    if _are_data_length_and_symbol_size_out_of_bounds(F, T, bounds):
        return InvalidParameterError(
            f"data length F={F} and symbol size T={T} give "
            f"{possible_total_symbols(F, T)} symbols, more than Kt_max={bounds.kt_max}")

    Kt = total_symbols(F, T)
    min_Z = _min_source_blocks_given(Kt, bounds)
    max_Z = _max_source_blocks_given(Kt, bounds)
    if not min_Z <= Z <= max_Z:
        return InvalidParameterError(
            f"number of source blocks Z={Z} must be in [{min_Z}, {max_Z}] "
            f"for Kt={Kt} total symbols", 'Z')

    max_N = _max_interleaver_length_given(T, bounds)
    if N > max_N:
        return InvalidParameterError(
            f"interleaver length N={N} exceeds {max_N} for symbol size T={T}", 'N')

    return None


def are_valid_parameters(data_length: int, symbol_size: int, num_source_blocks: int,
                         interleaver_length: int, bounds: SchemeBounds = RFC6330) -> bool:
    """Check whether (F, T, Z, N) is a legal parameter set."""
    return parameters_violation(
        data_length, symbol_size, num_source_blocks, interleaver_length, bounds) is None


# Payload length (P) ------------------------------------------------------------

def min_payload_length(bounds: SchemeBounds = RFC6330) -> int:
    return min_symbol_size(bounds)


def max_payload_length(bounds: SchemeBounds = RFC6330) -> int:
    return max_symbol_size(bounds)


def is_payload_length_out_of_bounds(payload_length: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(payload_length, min_payload_length(bounds), max_payload_length(bounds))


def min_payload_length_given(data_length: int, bounds: SchemeBounds = RFC6330) -> int:
    """Smallest payload length usable for data length F (see min_symbol_size_given)."""
    _check_data_length(data_length, bounds)
    return _min_payload_length_given(data_length, bounds)


def _min_payload_length_given(data_length: int, bounds: SchemeBounds) -> int:
    return _min_symbol_size_given(data_length, bounds)


# Decoder working memory (WS) ---------------------------------------------------

def min_decoding_block_size(bounds: SchemeBounds = RFC6330) -> int:
    """Smallest working memory any legal parameter set can be derived from."""
    return _min_decoding_block_size_given(bounds.f_min, bounds.t_min, bounds)


def is_decoding_block_size_out_of_bounds(max_memory: int, bounds: SchemeBounds = RFC6330) -> bool:
    return max_memory < min_decoding_block_size(bounds)


def min_decoding_block_size_given(data_length: int, payload_length: int,
                                  bounds: SchemeBounds = RFC6330) -> int:
    """
    Smallest working memory that fits data length F with payload length P.

    With Kt = ceil(F / P), each of at most Z_max blocks holds at least
    K' = max(K'_min, ceil(Kt / Z_max)) symbols, which needs
    min_working_memory(K', P, Al, top_interleaver_degree(P)) octets.

    Raises:
        InvalidParameterError: If F or P are out of bounds, alone or in unison
    """
    _check_data_length(data_length, bounds)
    _check_payload_length(payload_length, bounds)
    if _are_data_length_and_symbol_size_out_of_bounds(data_length, payload_length, bounds):
        raise InvalidParameterError(
            f"data length F={data_length} and payload length P={payload_length} "
            f"are out of bounds in unison")
    return _min_decoding_block_size_given(data_length, payload_length, bounds)


def _min_decoding_block_size_given(data_length: int, payload_length: int, bounds: SchemeBounds) -> int:
    Kt = total_symbols(data_length, payload_length)
    k_prime = max(bounds.k_prime_min, ceil_div(Kt, bounds.z_max))
    n = top_interleaver_degree(payload_length, bounds)
    return min_working_memory(k_prime, payload_length, bounds.al, n)


def max_data_length_given_memory(payload_length: int, max_memory: int,
                                 bounds: SchemeBounds = RFC6330) -> int:
    """
    Largest data length derivable from payload length P and memory WS.

    Returns:
        min(max_data_length_given(P), Z_max * KL * P), where KL is the
        largest K' fitting in WS at the top interleaver degree

    Raises:
        InvalidParameterError: If P or WS are out of bounds, or WS < P
    """
    _check_payload_length(payload_length, bounds)
    if is_decoding_block_size_out_of_bounds(max_memory, bounds):
        raise InvalidParameterError(
            f"working memory WS={max_memory} is below the minimum "
            f"{min_decoding_block_size(bounds)}", 'WS')
    if max_memory < payload_length:
        raise InvalidParameterError(
            f"working memory WS={max_memory} must be at least the payload length P={payload_length}",
            'WS')
    return _max_data_length_given_memory(payload_length, max_memory, bounds)


def _max_data_length_given_memory(payload_length: int, max_memory: int, bounds: SchemeBounds) -> int:
    bound_from_T = _max_data_length_given(payload_length, bounds)
    n = top_interleaver_degree(payload_length, bounds)
    KL = max_source_symbols_for_memory(max_memory, payload_length, bounds.al, n, bounds)
    bound_from_WS = bounds.z_max * KL * payload_length
    return min(bound_from_T, bound_from_WS)


def deriver_violation(data_length: int, payload_length: int, max_memory: int,
                      bounds: SchemeBounds = RFC6330) -> Optional[InvalidParameterError]:
    """
    Find the first constraint violated by derivation inputs (F, P, WS).

    Checks, in order: F and P absolute bounds; P a multiple of Al;
    WS >= min_decoding_block_size();
    P >= min_symbol_size_given(F); WS >= min_decoding_block_size_given(F, P).

    Returns:
        InvalidParameterError describing the violation (not raised), or None
    """
    F, P, WS = data_length, payload_length, max_memory

    if is_data_length_out_of_bounds(F, bounds):
        return _out_of_bounds('F', "data length", F, bounds.f_min, bounds.f_max)
    if is_payload_length_out_of_bounds(P, bounds):
        return _out_of_bounds('P', "payload length", P,
                              min_payload_length(bounds), max_payload_length(bounds))
    if P % bounds.al:
        return _unaligned('P', "payload length", P, bounds.al)

    absolute_min_WS = min_decoding_block_size(bounds)
    if WS < absolute_min_WS:
        return InvalidParameterError(
            f"working memory WS={WS} is below the minimum {absolute_min_WS}", 'WS')

    min_P = _min_payload_length_given(F, bounds)
    if P < min_P:
        return InvalidParameterError(
            f"payload length P={P} is below {min_P}, the minimum for data length F={F}", 'P')

    min_WS = _min_decoding_block_size_given(F, P, bounds)
    if WS < min_WS:
        return InvalidParameterError(
            f"working memory WS={WS} is below {min_WS}, the minimum for F={F} and P={P}", 'WS')

    return None


def are_valid_deriver_parameters(data_length: int, payload_length: int, max_memory: int,
                                 bounds: SchemeBounds = RFC6330) -> bool:
    """Check whether parameters can be derived from (F, P, WS)."""
    return deriver_violation(data_length, payload_length, max_memory, bounds) is None


# FEC payload ID (SBN, ESI) -----------------------------------------------------

def min_source_block_number(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.sbn_min


def max_source_block_number(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.sbn_max


def is_source_block_number_out_of_bounds(sbn: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(sbn, bounds.sbn_min, bounds.sbn_max)


def min_encoding_symbol_id(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.esi_min


def max_encoding_symbol_id(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.esi_max


def is_encoding_symbol_id_out_of_bounds(esi: int, bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(esi, bounds.esi_min, bounds.esi_max)


def is_valid_payload_id(sbn: int, esi: int, num_source_blocks: int,
                        bounds: SchemeBounds = RFC6330) -> bool:
    """
    Check a (SBN, ESI) pair against an object of Z source blocks.

    Raises:
        InvalidParameterError: If Z itself is out of bounds
    """
    _check_num_source_blocks(num_source_blocks, bounds)
    if sbn < bounds.sbn_min or sbn >= num_source_blocks:
        return False
    return not is_encoding_symbol_id_out_of_bounds(esi, bounds)


# Source symbols per block (K) --------------------------------------------------

def min_num_source_symbols_per_block(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.k_min


def max_num_source_symbols_per_block(bounds: SchemeBounds = RFC6330) -> int:
    return bounds.k_max


def is_num_source_symbols_per_block_out_of_bounds(num_symbols: int,
                                                  bounds: SchemeBounds = RFC6330) -> bool:
    return _outside(num_symbols, bounds.k_min, bounds.k_max)


def num_repair_symbols_per_block(num_symbols: int, bounds: SchemeBounds = RFC6330) -> int:
    """
    Number of repair symbols a block of K source symbols can produce.

    Returns:
        Size of the ESI space minus K

    Raises:
        InvalidParameterError: If K is out of bounds
    """
    if is_num_source_symbols_per_block_out_of_bounds(num_symbols, bounds):
        raise _out_of_bounds('K', "number of source symbols", num_symbols,
                             bounds.k_min, bounds.k_max)
    total = 1 + bounds.esi_max - bounds.esi_min
    return total - num_symbols


# Precondition checks -----------------------------------------------------------

def _are_data_length_and_symbol_size_out_of_bounds(data_length: int, symbol_size: int,
                                                   bounds: SchemeBounds) -> bool:
    return possible_total_symbols(data_length, symbol_size) > bounds.kt_max


def _check_data_length(F: int, bounds: SchemeBounds) -> None:
    if is_data_length_out_of_bounds(F, bounds):
        raise _out_of_bounds('F', "data length", F, bounds.f_min, bounds.f_max)


def _check_symbol_size(T: int, bounds: SchemeBounds) -> None:
    if is_symbol_size_out_of_bounds(T, bounds):
        raise _out_of_bounds('T', "symbol size", T, bounds.t_min, bounds.t_max)


def _check_payload_length(P: int, bounds: SchemeBounds) -> None:
    if is_payload_length_out_of_bounds(P, bounds):
        raise _out_of_bounds('P', "payload length", P,
                             min_payload_length(bounds), max_payload_length(bounds))


def _check_num_source_blocks(Z: int, bounds: SchemeBounds) -> None:
    if is_num_source_blocks_out_of_bounds(Z, bounds):
        raise _out_of_bounds('Z', "number of source blocks", Z, bounds.z_min, bounds.z_max)


def _check_total_symbols(Kt: int, bounds: SchemeBounds) -> None:
    if _outside(Kt, 1, bounds.kt_max):
        raise _out_of_bounds('Kt', "total number of symbols", Kt, 1, bounds.kt_max)
