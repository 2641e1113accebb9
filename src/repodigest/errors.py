# src/repodigest/errors.py


class RepoDigestError(Exception):
    """Base class for all repodigest errors."""


class ConfigurationError(RepoDigestError, ValueError):
    """Raised for structurally invalid settings, before any work starts."""


class RepositoryNotFoundError(RepoDigestError, FileNotFoundError):
    """The scan root does not exist or is not a directory."""


class CloneError(RepoDigestError):
    """Fetching a remote repository failed."""
