class TmuxstarError(Exception):
    """Base exception for tmuxstar."""
    pass


class ConfigurationError(TmuxstarError):
    """Errors related to the configuration file or environment."""
    pass


class GitBackendError(TmuxstarError):
    """Errors selecting or constructing a git backend."""
    pass
