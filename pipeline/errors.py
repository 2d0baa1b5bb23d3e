class ArgumentError(ValueError):
    """Raised for malformed command line input, before any network call."""
    pass
