"""
RaptorQ FEC Parameters

Immutable, validated set of the parameters both endpoints of a RaptorQ
transfer must agree on:

    F   data length (octets)              Z   number of source blocks
    T   symbol size (octets)              N   interleaver length (sub-blocks)
    Al  symbol alignment (octets)

Only the two packed OTI fields are stored; every parameter is a projection
of them. Instances are created by:

    - new_parameters(F, T, Z[, N]): validate caller-chosen parameters
    - derive_parameters(F, P, WS): choose T, Z and N from the data length,
      payload length and decoder memory budget
    - parse() / from_bytes(): validate an OTI received from a peer
    - new_local_instance(F, T, Z, N, Al): pack already validated values

Reference: RFC 6330 Sections 3.3 and 4.3
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from . import ParameterChecker
from . import ParameterIO
from .Derivation import (
    Partition,
    min_working_memory,
    max_source_symbols_for_memory,
    source_block_partition,
    sub_block_partition,
    top_interleaver_degree,
)
from .Derivation import total_symbols as _total_symbols
from .Errors import InvalidParameterError
from .ExtraMath import ceil_div, check_width
from .SchemeBounds import SchemeBounds, RFC6330


logger = logging.getLogger(__name__)

OTI_SIZE = ParameterIO.COMMON_OTI_SIZE + ParameterIO.SCHEME_SPECIFIC_OTI_SIZE


@dataclass(frozen=True)
class FECParameters:
    """
    Validated RaptorQ FEC parameters, stored as packed OTI fields.

    Use the factories to build instances. Calling the constructor directly
    is the raw, unchecked form: like new_local_instance(), it trusts the
    caller that the two fields hold a legal parameter set, and unlike it,
    it does not even check the field widths.

    Attributes:
        common_fec_oti: 64-bit common OTI (F, T)
        scheme_specific_fec_oti: 32-bit scheme-specific OTI (Z, N, Al)

    Example:
        >>> params = FECParameters.derive_parameters(1_000_000, 1024, 4 * 1024 * 1024)
        >>> params.symbol_size
        1024
        >>> params.total_symbols
        977
        >>> FECParameters.from_bytes(params.to_bytes()) == params
        True
    """

    common_fec_oti: int
    scheme_specific_fec_oti: int

    # Factories ------------------------------------------------------------

    @classmethod
    def new_parameters(cls, data_length: int, symbol_size: int, num_source_blocks: int,
                       interleaver_length: Optional[int] = None,
                       bounds: SchemeBounds = RFC6330) -> 'FECParameters':
        """
        Create parameters from caller-chosen values.

        Args:
            data_length: Data length F (octets)
            symbol_size: Symbol size T (octets)
            num_source_blocks: Number of source blocks Z
            interleaver_length: Interleaver length N (default: N_min)
            bounds: Scheme bounds to validate against

        Returns:
            Validated parameters

        Raises:
            InvalidParameterError: If (F, T, Z, N) is not a legal combination
        """
        if interleaver_length is None:
            interleaver_length = bounds.n_min

        error = ParameterChecker.parameters_violation(
            data_length, symbol_size, num_source_blocks, interleaver_length, bounds)
        if error is not None:
            raise error

        return cls.new_local_instance(
            data_length, symbol_size, num_source_blocks, interleaver_length, bounds.al)

    @classmethod
    def derive_parameters(cls, data_length: int, payload_length: int, max_memory: int,
                          bounds: SchemeBounds = RFC6330) -> 'FECParameters':
        """
        Derive parameters from data length, payload length and memory budget.

        One symbol is sent per packet, so T = P. Z is the fewest source
        blocks whose decoding fits in WS at the top interleaver degree,
        and N the fewest sub-blocks that still fit:

            Z = ceil(Kt / KL(N_top))
            N = min{n >= 1 : ceil(Kt / Z) <= KL(n)}

        Args:
            data_length: Data length F (octets)
            payload_length: Packet payload length P (octets)
            max_memory: Decoder working memory budget WS (octets)
            bounds: Scheme bounds to validate against

        Returns:
            Validated parameters

        Raises:
            InvalidParameterError: If no legal parameters exist for the inputs
        """
        error = ParameterChecker.deriver_violation(data_length, payload_length, max_memory, bounds)
        if error is not None:
            raise error

        T = payload_length
        Kt = _total_symbols(data_length, T)
        top_N = top_interleaver_degree(T, bounds)

        Z = cls._derive_num_source_blocks(Kt, max_memory, T, bounds.al, top_N, bounds)
        N = cls._derive_interleaver_length(Kt, Z, max_memory, T, bounds.al, top_N)

        logger.debug(f"Derived F={data_length} T={T} Z={Z} N={N} "
                     f"(Kt={Kt}, WS={max_memory}, top N={top_N})")

        return cls.new_local_instance(data_length, T, Z, N, bounds.al)

    @staticmethod
    def _derive_num_source_blocks(Kt: int, max_memory: int, T: int, Al: int, top_N: int,
                                  bounds: SchemeBounds) -> int:
        KL = max_source_symbols_for_memory(max_memory, T, Al, top_N, bounds)
        return ceil_div(Kt, KL)

    @staticmethod
    def _derive_interleaver_length(Kt: int, Z: int, max_memory: int, T: int, Al: int,
                                   top_N: int) -> int:
        # Largest source block must fit in WS once split into n sub-blocks
        K = ceil_div(Kt, Z)
        for n in range(1, top_N + 1):
            if min_working_memory(K, T, Al, n) <= max_memory:
                return n
        return top_N

    @classmethod
    def new_local_instance(cls, data_length: int, symbol_size: int, num_source_blocks: int,
                           interleaver_length: int, symbol_alignment: int) -> 'FECParameters':
        """
        Pack parameters without validating them.

        The caller guarantees the values form a legal parameter set; only
        the OTI field widths are enforced.
        """
        return cls(
            ParameterIO.build_common_fec_oti(data_length, symbol_size),
            ParameterIO.build_scheme_specific_fec_oti(
                num_source_blocks, interleaver_length, symbol_alignment),
        )

    @classmethod
    def parse(cls, common_fec_oti: int, scheme_specific_fec_oti: int,
              bounds: SchemeBounds = RFC6330) -> 'FECParameters':
        """
        Validate OTI fields received from a peer.

        Raises:
            InvalidParameterError: If the fields carry illegal parameters or
                                   a symbol alignment other than bounds.al
        """
        check_width(common_fec_oti, 64, 'common OTI')
        check_width(scheme_specific_fec_oti, 32, 'scheme-specific OTI')
        if common_fec_oti & (((1 << ParameterIO.RESERVED_BITS) - 1) << ParameterIO.T_BITS):
            raise InvalidParameterError("Reserved bits of common OTI must be zero")

        params = cls(common_fec_oti, scheme_specific_fec_oti)

        if params.symbol_alignment != bounds.al:
            raise InvalidParameterError(
                f"symbol alignment Al={params.symbol_alignment} is not the scheme's {bounds.al}", 'Al')

        error = ParameterChecker.parameters_violation(
            params.data_length, params.symbol_size, params.num_source_blocks,
            params.interleaver_length, bounds)
        if error is not None:
            raise error

        return params

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], bounds: SchemeBounds = RFC6330) -> 'FECParameters':
        """
        Parse and validate a 12-octet OTI (common OTI then scheme-specific OTI).

        Raises:
            InvalidParameterError: If data is malformed or carries illegal parameters
        """
        if len(data) != OTI_SIZE:
            raise InvalidParameterError(f"OTI must be {OTI_SIZE} bytes, got {len(data)}")

        common = ParameterIO.common_oti_from_bytes(data[:ParameterIO.COMMON_OTI_SIZE])
        scheme = ParameterIO.scheme_specific_oti_from_bytes(data[ParameterIO.COMMON_OTI_SIZE:])
        return cls.parse(common, scheme, bounds)

    # Accessors ------------------------------------------------------------

    @property
    def data_length(self) -> int:
        """Data length F (octets)."""
        return ParameterIO.extract_data_length(self.common_fec_oti)

    @property
    def symbol_size(self) -> int:
        """Symbol size T (octets)."""
        return ParameterIO.extract_symbol_size(self.common_fec_oti)

    @property
    def num_source_blocks(self) -> int:
        """Number of source blocks Z."""
        return ParameterIO.extract_num_source_blocks(self.scheme_specific_fec_oti)

    @property
    def interleaver_length(self) -> int:
        """Interleaver length N (sub-blocks per source block)."""
        return ParameterIO.extract_interleaver_length(self.scheme_specific_fec_oti)

    @property
    def symbol_alignment(self) -> int:
        """Symbol alignment Al (octets)."""
        return ParameterIO.extract_symbol_alignment(self.scheme_specific_fec_oti)

    @property
    def total_symbols(self) -> int:
        """Total number of source symbols Kt = ceil(F / T)."""
        return _total_symbols(self.data_length, self.symbol_size)

    # Derived layout -------------------------------------------------------

    def source_block_partition(self) -> Partition:
        """
        How the Kt symbols are split into Z source blocks.

        Returns:
            Partition(KL, KS, ZL, ZS): the first ZL blocks hold KL symbols,
            the remaining ZS blocks hold KS symbols
        """
        return source_block_partition(self.total_symbols, self.num_source_blocks)

    def sub_block_partition(self) -> Partition:
        """
        How each symbol is split into N sub-symbols.

        Returns:
            Partition(TL, TS, NL, NS) in units of Al octets
        """
        return sub_block_partition(self.symbol_size, self.symbol_alignment, self.interleaver_length)

    def is_valid_payload_id(self, sbn: int, esi: int, bounds: SchemeBounds = RFC6330) -> bool:
        """Check that (SBN, ESI) addresses a symbol of this object."""
        return ParameterChecker.is_valid_payload_id(sbn, esi, self.num_source_blocks, bounds)

    # Serialization --------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize as 12 octets: common OTI followed by scheme-specific OTI."""
        return (ParameterIO.common_oti_to_bytes(self.common_fec_oti) +
                ParameterIO.scheme_specific_oti_to_bytes(self.scheme_specific_fec_oti))

    def as_dict(self) -> Dict[str, Any]:
        return {
            'data_length': self.data_length,
            'symbol_size': self.symbol_size,
            'num_source_blocks': self.num_source_blocks,
            'interleaver_length': self.interleaver_length,
            'symbol_alignment': self.symbol_alignment,
            'total_symbols': self.total_symbols,
        }

    def __repr__(self) -> str:
        return (f"FECParameters(F={self.data_length}, T={self.symbol_size}, "
                f"Z={self.num_source_blocks}, N={self.interleaver_length}, "
                f"Al={self.symbol_alignment})")
