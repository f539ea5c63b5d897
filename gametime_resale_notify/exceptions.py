"""Exceptions raised by the Gametime Resale Notifier."""


class ResaleNotifyError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(ResaleNotifyError):
    """The listings document could not be retrieved."""


class ListingValidationError(ResaleNotifyError):
    """The listings document does not have the expected shape."""


class ConfigurationError(ResaleNotifyError):
    """The configuration is missing a value or holds an invalid one."""
