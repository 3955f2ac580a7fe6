"""Exception and warning types raised by pwlnn."""


class ConfigurationError(ValueError):
    """Missing argument, dimension mismatch, odd max_bp or unknown activation."""


class DataInsufficiencyWarning(UserWarning):
    """Not enough data to sample or to place the requested breakpoints."""


class SelectionInadequacyWarning(UserWarning):
    """No breakpoint level met the error tolerance; the richest one was used."""
