class AlarmEngineError(Exception):
    """Base exception for alarm_engine package."""

    pass


class InvalidDefinition(AlarmEngineError):
    """Raised when an alarm definition violates its invariants."""

    pass


class DuplicateName(AlarmEngineError):
    """Raised when a resolved alarm name is already registered."""

    pass


class EmptyCompositeSet(AlarmEngineError):
    """Raised when a composite alarm would have no members."""

    pass


class UnresolvedThreshold(AlarmEngineError):
    """Raised when a timeout-relative threshold has no timeout to resolve against."""

    pass


class ConfigurationError(AlarmEngineError):
    """Raised when there's a configuration error."""

    pass
