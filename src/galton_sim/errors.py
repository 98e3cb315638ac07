class ConfigurationError(ValueError):
    """Raised when a configuration value falls outside its allowed range."""
