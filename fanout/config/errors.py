class ConfigError(Exception):
    """The relay configuration could not be loaded, validated or resolved."""
