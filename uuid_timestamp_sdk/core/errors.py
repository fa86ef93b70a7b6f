"""Exception hierarchy for the UUID Timestamp SDK."""


class UuidTimestampError(Exception):
    """SDK base exception."""


class MalformedUuidError(UuidTimestampError):
    """UUID text is not 32 hex digits once hyphens are removed."""


class MalformedInstantError(UuidTimestampError):
    """Instant string does not follow the YYYY-MM-DDTHH:MM:SS layout."""


class AnnotationNotFoundError(UuidTimestampError):
    """No annotation is stored for the requested span."""


class ConfigError(UuidTimestampError):
    """Configuration value is missing, malformed, or out of range."""
