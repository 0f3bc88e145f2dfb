"""Domain-specific errors for bulbctl."""


class BulbctlError(Exception):
    """Base error for bulbctl."""


class ConfigurationError(BulbctlError):
    """Raised when a device endpoint is missing required settings."""


class ConfigValidationError(BulbctlError):
    """Raised when a device registry file does not conform to schema or semantics."""


class ConfigLoadError(BulbctlError):
    """Raised when reading device registry sources fails."""


class DeviceSelectionError(BulbctlError):
    """Raised when a device hint cannot resolve a single target."""


class ProtocolError(BulbctlError):
    """Raised when a reply cannot be deciphered or decoded."""


class TransportError(BulbctlError):
    """Base transport error."""


class TransportBindError(TransportError):
    """Raised when the UDP socket cannot be bound."""


class TransportSendError(TransportError):
    """Raised when the datagram cannot be transmitted."""


class ExchangeTimeoutError(BulbctlError, TimeoutError):
    """Raised when the device does not reply within the configured window."""
