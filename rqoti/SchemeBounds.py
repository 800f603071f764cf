"""
RaptorQ Scheme Bounds

The absolute limits of every FEC parameter, gathered in one immutable
configuration value. All checker and formula functions take a `bounds`
argument defaulting to RFC6330, so alternative bound sets can be exercised
without touching module globals.

Field widths of the OTI (see ParameterIO):
    F: 40 bits, T: 16 bits, Z: 8 bits (256 carried as 0), N: 16 bits, Al: 8 bits

Reference: RFC 6330 Sections 3.3 and 4.3
"""

from dataclasses import dataclass

from .Errors import InvalidParameterError


# Largest values representable in the OTI fields
F_FIELD_MAX = (1 << 40) - 1
T_FIELD_MAX = (1 << 16) - 1
Z_FIELD_MAX = 1 << 8          # 256 is encoded as 0
N_FIELD_MAX = (1 << 16) - 1
AL_FIELD_MAX = (1 << 8) - 1


@dataclass(frozen=True)
class SchemeBounds:
    """
    Absolute bounds of a RaptorQ parameter set.

    Attributes:
        al: Symbol alignment parameter Al (octets)
        ss: Sub-symbol factor SS; SS * Al is the desired minimum sub-symbol size
        f_min, f_max: Data length F (octets)
        t_min, t_max: Symbol size T (octets, multiples of Al)
        z_min, z_max: Number of source blocks Z
        n_min, n_max: Interleaver length N (sub-blocks per source block)
        k_min, k_max: Source symbols per source block
        k_prime_min: Smallest supported systematic block size K'
        sbn_min, sbn_max: Source block number
        esi_min, esi_max: Encoding symbol ID

    Example:
        >>> small = SchemeBounds(z_max=16)
        >>> small.kt_max
        902448
    """

    al: int = 4
    ss: int = 8
    f_min: int = 1
    f_max: int = 946_270_874_880
    t_min: int = 4
    t_max: int = (65_535 // 4) * 4
    z_min: int = 1
    z_max: int = 256
    n_min: int = 1
    n_max: int = 65_532 // 4
    k_min: int = 1
    k_max: int = 56_403
    k_prime_min: int = 10
    sbn_min: int = 0
    sbn_max: int = 255
    esi_min: int = 0
    esi_max: int = (1 << 24) - 1

    def __post_init__(self):
        """Reject inconsistent bound sets."""
        if not 1 <= self.al <= AL_FIELD_MAX:
            raise InvalidParameterError(f"Al must be 1-{AL_FIELD_MAX}, got {self.al}", 'Al')
        if self.ss < 1:
            raise InvalidParameterError(f"SS must be positive, got {self.ss}")

        ranges = (
            ('F', self.f_min, self.f_max, F_FIELD_MAX),
            ('T', self.t_min, self.t_max, T_FIELD_MAX),
            ('Z', self.z_min, self.z_max, Z_FIELD_MAX),
            ('N', self.n_min, self.n_max, N_FIELD_MAX),
        )
        for name, low, high, field_max in ranges:
            if not 1 <= low <= high <= field_max:
                raise InvalidParameterError(
                    f"{name} bounds must satisfy 1 <= min <= max <= {field_max}, "
                    f"got [{low}, {high}]", name)

        if self.t_min % self.al or self.t_max % self.al:
            raise InvalidParameterError(
                f"T bounds must be multiples of Al={self.al}, got [{self.t_min}, {self.t_max}]", 'T')
        if not 1 <= self.k_min <= self.k_prime_min <= self.k_max:
            raise InvalidParameterError(
                f"K bounds must satisfy 1 <= K_min <= K'_min <= K_max, "
                f"got {self.k_min}, {self.k_prime_min}, {self.k_max}", 'K')
        if not 0 <= self.sbn_min <= self.sbn_max:
            raise InvalidParameterError(f"Invalid SBN bounds [{self.sbn_min}, {self.sbn_max}]", 'SBN')
        if not 0 <= self.esi_min <= self.esi_max:
            raise InvalidParameterError(f"Invalid ESI bounds [{self.esi_min}, {self.esi_max}]", 'ESI')

    @property
    def kt_max(self) -> int:
        """Maximum total number of symbols over all source blocks."""
        return self.k_max * self.z_max


# Bounds defined by RFC 6330
RFC6330 = SchemeBounds()
