"""
rqoti - RaptorQ Object Transmission Information

Computes and validates the FEC parameters of the RaptorQ code (RFC 6330)
and packs them into the Object Transmission Information (OTI) exchanged
between encoder and decoder.

Modules:
    Parameters:
        - FECParameters: Immutable validated parameter set (F, T, Z, N, Al)
        - ParameterChecker: Absolute and conditional parameter bounds
        - Derivation: Symbol counts, sub-symbol sizes and memory formulas
        - SchemeBounds: Bounds configuration (RFC 6330 defaults)

    Encoding:
        - ParameterIO: Common/scheme-specific OTI and FEC payload ID fields

    Helpers:
        - SystematicSizes: Supported systematic block sizes (K')
        - ExtraMath: Ceiling division and field width checks
        - Errors: InvalidParameterError
"""

__version__ = "0.1.0"
__author__ = "rqoti Contributors"

from .Errors import InvalidParameterError
from .SchemeBounds import SchemeBounds, RFC6330
from .SystematicSizes import floor_to_systematic, ceil_to_systematic
from .Derivation import (
    Partition,
    total_symbols,
    sub_symbol_size,
    min_working_memory,
    max_source_symbols_for_memory,
    top_interleaver_degree,
)
from . import ParameterChecker
from . import ParameterIO
from .FECParameters import FECParameters

# OTI field sizes in octets
OTI_SIZES = {
    'common': ParameterIO.COMMON_OTI_SIZE,
    'scheme_specific': ParameterIO.SCHEME_SPECIFIC_OTI_SIZE,
    'payload_id': ParameterIO.PAYLOAD_ID_SIZE,
}

__all__ = [
    # Constants
    'OTI_SIZES', 'RFC6330',

    # Configuration and errors
    'SchemeBounds', 'InvalidParameterError',

    # Formulas
    'Partition', 'total_symbols', 'sub_symbol_size', 'min_working_memory',
    'max_source_symbols_for_memory', 'top_interleaver_degree',
    'floor_to_systematic', 'ceil_to_systematic',

    # Checker and codec
    'ParameterChecker', 'ParameterIO',

    # Main
    'FECParameters',
]
