"""Exception types raised by the toolkit."""


class SceneError(Exception):
    """Base class for all toolkit errors."""


class ConfigError(SceneError):
    """Raised when the ingestion configuration is missing or malformed."""


class MissingCredentialError(SceneError):
    """Raised when a required API credential is not configured."""


class ArtifactFormatError(SceneError):
    """Raised when a generated venue module cannot be parsed."""
