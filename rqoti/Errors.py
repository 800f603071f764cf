"""
Error type for RaptorQ parameter handling

Every failure in this package is a precondition violation: the caller
supplied a parameter (or a combination of parameters) that the scheme does
not allow. There is a single exception class for it.
"""

from typing import Optional


class InvalidParameterError(ValueError):
    """
    Raised when a FEC parameter violates an absolute or conditional bound.

    Attributes:
        parameter: Name of the offending parameter ('F', 'T', 'Z', 'N', 'Kt',
                   'Al', 'P', 'WS', 'K', 'SBN', 'ESI'), or None when the
                   violation involves several parameters in unison

    Example:
        >>> try:
        ...     FECParameters.new_parameters(0, 1024, 1)
        ... except InvalidParameterError as e:
        ...     print(e.parameter)
        F
    """

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter
