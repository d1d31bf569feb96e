class RevoError(Exception):
    """Base for all revo exceptions."""

    pass


class ConfigurationError(RevoError):
    """Invalid distribution parameters or run settings, rejected before any work."""

    pass


class DataContractViolation(RevoError):
    """Training or prediction data does not satisfy the expected shape."""

    pass


class InternalInvariantViolation(RevoError):
    """Evolution state is inconsistent; indicates a programming error."""

    pass
