"""
rqoti Command Line Interface

Usage:
    python -m rqoti derive <F> <P> <WS>     # Derive parameters from a memory budget
    python -m rqoti check <F> <T> <Z> [N]   # Validate a parameter set
    python -m rqoti decode <hex>            # Decode a 12-octet OTI
    python -m rqoti bounds                  # Show the scheme bounds

Examples:
    # 10 MB object, 1400-byte packets, 8 MiB decoder memory
    python -m rqoti derive 10000000 1400 8388608

    # Check an explicit parameter set with 4 sub-blocks
    python -m rqoti check 10000000 1400 2 4

    # Decode an OTI captured from a session description
    python -m rqoti decode 00000f424000040001000104
"""

import argparse
import binascii
import logging
import sys
from typing import Optional

from . import __version__, OTI_SIZES
from . import ParameterChecker
from .Errors import InvalidParameterError
from .FECParameters import FECParameters
from .SchemeBounds import RFC6330


def _print_parameters(params: FECParameters) -> None:
    KL, KS, ZL, ZS = params.source_block_partition()
    TL, TS, NL, NS = params.sub_block_partition()
    Al = params.symbol_alignment

    print(f"Data length (F):          {params.data_length:,} bytes")
    print(f"Symbol size (T):          {params.symbol_size} bytes")
    print(f"Source blocks (Z):        {params.num_source_blocks}")
    print(f"Interleaver length (N):   {params.interleaver_length}")
    print(f"Symbol alignment (Al):    {Al}")
    print(f"Total symbols (Kt):       {params.total_symbols:,}")
    print()
    print(f"Source blocks:  {ZL} x {KL} symbols, {ZS} x {KS} symbols")
    print(f"Sub-blocks:     {NL} x {TL * Al} bytes, {NS} x {TS * Al} bytes")
    print()
    print(f"Common OTI:           0x{params.common_fec_oti:016X}")
    print(f"Scheme-specific OTI:  0x{params.scheme_specific_fec_oti:08X}")
    print(f"OTI:                  {params.to_bytes().hex()}")


def cmd_derive(args: argparse.Namespace) -> int:
    """Derive parameters from data length, payload length and memory."""
    try:
        params = FECParameters.derive_parameters(args.data_length, args.payload_length, args.memory)
    except InvalidParameterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_parameters(params)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Validate an explicit parameter set."""
    try:
        params = FECParameters.new_parameters(
            args.data_length, args.symbol_size, args.source_blocks, args.interleaver_length)
    except InvalidParameterError as e:
        print(f"Invalid: {e}", file=sys.stderr)
        return 1

    print("Valid parameters")
    print()
    _print_parameters(params)
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode and validate a hex-encoded OTI."""
    try:
        data = binascii.unhexlify(args.oti)
    except (binascii.Error, ValueError) as e:
        print(f"Error: not a hex string: {e}", file=sys.stderr)
        return 1

    try:
        params = FECParameters.from_bytes(data)
    except InvalidParameterError as e:
        print(f"Invalid: {e}", file=sys.stderr)
        return 1

    _print_parameters(params)
    return 0


def cmd_bounds(args: argparse.Namespace) -> int:
    """Show the RFC 6330 bounds."""
    b = RFC6330

    print(f"  {'Parameter':<28}  {'Min':>16}  {'Max':>16}")
    print(f"  {'-'*28}  {'-'*16}  {'-'*16}")
    rows = [
        ("Data length (F)", b.f_min, b.f_max),
        ("Symbol size (T)", b.t_min, b.t_max),
        ("Source blocks (Z)", b.z_min, b.z_max),
        ("Interleaver length (N)", b.n_min, b.n_max),
        ("Symbols per block (K)", b.k_min, b.k_max),
        ("Total symbols (Kt)", 1, b.kt_max),
        ("Source block number", b.sbn_min, b.sbn_max),
        ("Encoding symbol ID", b.esi_min, b.esi_max),
    ]
    for name, low, high in rows:
        print(f"  {name:<28}  {low:>16,}  {high:>16,}")

    print()
    print(f"Symbol alignment (Al):  {b.al}")
    print(f"Sub-symbol factor (SS): {b.ss}")
    print(f"Minimum decoder memory: {ParameterChecker.min_decoding_block_size(b):,} bytes")
    print(f"Field sizes (octets):   common OTI {OTI_SIZES['common']}, "
          f"scheme-specific OTI {OTI_SIZES['scheme_specific']}, "
          f"payload ID {OTI_SIZES['payload_id']}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='rqoti',
        description='RaptorQ FEC parameter (OTI) calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # Derive command
    derive_parser = subparsers.add_parser('derive', help='Derive parameters from a memory budget')
    derive_parser.add_argument('data_length', type=int, help='Data length F (bytes)')
    derive_parser.add_argument('payload_length', type=int, help='Packet payload length P (bytes)')
    derive_parser.add_argument('memory', type=int, help='Decoder working memory WS (bytes)')

    # Check command
    check_parser = subparsers.add_parser('check', help='Validate a parameter set')
    check_parser.add_argument('data_length', type=int, help='Data length F (bytes)')
    check_parser.add_argument('symbol_size', type=int, help='Symbol size T (bytes)')
    check_parser.add_argument('source_blocks', type=int, help='Number of source blocks Z')
    check_parser.add_argument('interleaver_length', type=int, nargs='?', default=None,
                              help='Interleaver length N (default: 1)')

    # Decode command
    decode_parser = subparsers.add_parser('decode', help='Decode a hex-encoded OTI')
    decode_parser.add_argument('oti', help='12-octet OTI as 24 hex digits')

    # Bounds command
    subparsers.add_parser('bounds', help='Show the scheme bounds')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        'derive': cmd_derive,
        'check': cmd_check,
        'decode': cmd_decode,
        'bounds': cmd_bounds,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
