"""
RaptorQ OTI and FEC Payload ID Field Codec

Bit layouts (most significant bit first):

    Common FEC OTI (64 bits):
        +----------------------------------------+----------+----------------+
        | Transfer Length F (40)                 | Rsvd (8) | Symbol Size T  |
        |                                        |  = 0     | (16)           |
        +----------------------------------------+----------+----------------+

    Scheme-Specific FEC OTI (32 bits):
        +----------+----------------------+----------+
        | Z (8)    | N (16)               | Al (8)   |
        +----------+----------------------+----------+

    FEC Payload ID (32 bits):
        +----------+------------------------------------+
        | SBN (8)  | Encoding Symbol ID (24)            |
        +----------+------------------------------------+

Z may be 256, which does not fit in 8 bits; it is carried as 0 and
read back as 256.

On the wire the fields are big-endian (network order): 8 octets for the
common OTI, 4 octets each for the scheme-specific OTI and the payload ID.

Reference: RFC 6330 Sections 3.2 and 3.3
"""

import struct
from typing import Tuple, Union

from .Errors import InvalidParameterError
from .ExtraMath import check_width


COMMON_OTI_SIZE = 8
SCHEME_SPECIFIC_OTI_SIZE = 4
PAYLOAD_ID_SIZE = 4

F_BITS = 40
RESERVED_BITS = 8
T_BITS = 16
Z_BITS = 8
N_BITS = 16
AL_BITS = 8
SBN_BITS = 8
ESI_BITS = 24

_F_SHIFT = RESERVED_BITS + T_BITS
_RESERVED_MASK = ((1 << RESERVED_BITS) - 1) << T_BITS
_Z_SHIFT = N_BITS + AL_BITS

BytesLike = Union[bytes, bytearray, memoryview]


# Common FEC OTI ---------------------------------------------------------------

def build_common_fec_oti(data_length: int, symbol_size: int) -> int:
    """
    Pack F and T into the 64-bit common OTI.

    Raises:
        InvalidParameterError: If F or T do not fit their fields
    """
    F = check_width(data_length, F_BITS, 'F')
    T = check_width(symbol_size, T_BITS, 'T')
    return (F << _F_SHIFT) | T


def extract_data_length(common_fec_oti: int) -> int:
    return common_fec_oti >> _F_SHIFT


def extract_symbol_size(common_fec_oti: int) -> int:
    return common_fec_oti & ((1 << T_BITS) - 1)


def common_oti_to_bytes(common_fec_oti: int) -> bytes:
    return struct.pack('>Q', common_fec_oti)


def common_oti_from_bytes(data: BytesLike) -> int:
    """
    Read a common OTI from 8 octets.

    Raises:
        InvalidParameterError: If data has the wrong size or the reserved
                               octet is not zero
    """
    if len(data) != COMMON_OTI_SIZE:
        raise InvalidParameterError(
            f"Common OTI must be {COMMON_OTI_SIZE} bytes, got {len(data)}")
    (common_fec_oti,) = struct.unpack('>Q', bytes(data))
    if common_fec_oti & _RESERVED_MASK:
        raise InvalidParameterError(
            f"Reserved octet of common OTI must be zero, got 0x{data[5]:02X}")
    return common_fec_oti


# Scheme-specific FEC OTI ------------------------------------------------------

def build_scheme_specific_fec_oti(num_source_blocks: int, interleaver_length: int,
                                  symbol_alignment: int) -> int:
    """
    Pack Z, N and Al into the 32-bit scheme-specific OTI.

    Raises:
        InvalidParameterError: If Z is not 1-256 or N, Al do not fit their fields
    """
    if not 1 <= num_source_blocks <= (1 << Z_BITS):
        raise InvalidParameterError(
            f"Z={num_source_blocks} cannot be encoded, must be 1-{1 << Z_BITS}", 'Z')
    Z = num_source_blocks & ((1 << Z_BITS) - 1)
    N = check_width(interleaver_length, N_BITS, 'N')
    Al = check_width(symbol_alignment, AL_BITS, 'Al')
    return (Z << _Z_SHIFT) | (N << AL_BITS) | Al


def extract_num_source_blocks(scheme_specific_fec_oti: int) -> int:
    Z = (scheme_specific_fec_oti >> _Z_SHIFT) & ((1 << Z_BITS) - 1)
    return Z if Z else 1 << Z_BITS


def extract_interleaver_length(scheme_specific_fec_oti: int) -> int:
    return (scheme_specific_fec_oti >> AL_BITS) & ((1 << N_BITS) - 1)


def extract_symbol_alignment(scheme_specific_fec_oti: int) -> int:
    return scheme_specific_fec_oti & ((1 << AL_BITS) - 1)


def scheme_specific_oti_to_bytes(scheme_specific_fec_oti: int) -> bytes:
    return struct.pack('>I', scheme_specific_fec_oti)


def scheme_specific_oti_from_bytes(data: BytesLike) -> int:
    if len(data) != SCHEME_SPECIFIC_OTI_SIZE:
        raise InvalidParameterError(
            f"Scheme-specific OTI must be {SCHEME_SPECIFIC_OTI_SIZE} bytes, got {len(data)}")
    return struct.unpack('>I', bytes(data))[0]


# FEC Payload ID ---------------------------------------------------------------

def build_fec_payload_id(sbn: int, esi: int) -> int:
    """
    Pack a source block number and encoding symbol ID into 32 bits.

    Raises:
        InvalidParameterError: If SBN or ESI do not fit their fields
    """
    sbn = check_width(sbn, SBN_BITS, 'SBN')
    esi = check_width(esi, ESI_BITS, 'ESI')
    return (sbn << ESI_BITS) | esi


def extract_source_block_number(payload_id: int) -> int:
    return (payload_id >> ESI_BITS) & ((1 << SBN_BITS) - 1)


def extract_encoding_symbol_id(payload_id: int) -> int:
    return payload_id & ((1 << ESI_BITS) - 1)


def payload_id_to_bytes(sbn: int, esi: int) -> bytes:
    return struct.pack('>I', build_fec_payload_id(sbn, esi))


def payload_id_from_bytes(data: BytesLike) -> Tuple[int, int]:
    """
    Read a FEC payload ID from 4 octets.

    Returns:
        (SBN, ESI)
    """
    if len(data) != PAYLOAD_ID_SIZE:
        raise InvalidParameterError(
            f"FEC payload ID must be {PAYLOAD_ID_SIZE} bytes, got {len(data)}")
    payload_id = struct.unpack('>I', bytes(data))[0]
    return extract_source_block_number(payload_id), extract_encoding_symbol_id(payload_id)
