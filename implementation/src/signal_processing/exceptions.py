class ConfigurationError(ValueError):
    """Raised when a processor is constructed with invalid settings."""
