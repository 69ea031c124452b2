"""aurwatch exception hierarchy.

All aurwatch-specific exceptions inherit from AurWatchError. Errors raised
while updating a single package derive from UpdateError so the refresh cycle
can isolate them per package.
"""


class AurWatchError(Exception):
    """Base exception for all aurwatch errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ConfigError(AurWatchError):
    """Invalid or missing configuration."""


class UpdateError(AurWatchError):
    """Failure scoped to one package update attempt."""


class DifferentDirsError(UpdateError):
    """Custom and upstream trees diverge in a way that is not a new-file addition."""


class ChecksFailedError(UpdateError):
    """Content validation rejected the upstream change."""


class JobSubmissionError(UpdateError):
    """The build provider refused or failed to accept a job."""


class JobInfoError(UpdateError):
    """Polling the build provider for job status failed."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)


class JobFailedError(UpdateError):
    """The build job reached a failed or cancelled terminal state."""


class GitError(UpdateError):
    """Clone, commit or push failed."""


class BuildToolError(UpdateError):
    """Regenerating derived package metadata failed."""


class LookupFailedError(UpdateError):
    """The remote package index could not be queried."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)


class PackageReadError(UpdateError):
    """A local artifact is not a readable package archive."""
