"""Custom exception classes for multichain-deployer library."""


class DeploymentError(Exception):
    """Base exception for multichain deployment errors."""

    pass


class UnknownNetworkError(DeploymentError, LookupError):
    """Raised when a network name has no registered domain id."""

    pass


class DuplicateNetworkError(DeploymentError, ValueError):
    """Raised when a network name is registered with two different domain ids."""

    pass


class InvalidDeploymentTargetError(DeploymentError, ValueError):
    """Raised when a deployment target cannot be staged."""

    pass


class NoDeploymentTargetsError(DeploymentError, ValueError):
    """Raised when deploying with no staged targets."""

    pass


class BytecodeNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a contract identifier does not resolve to creation bytecode."""

    pass


class AdapterCallError(DeploymentError, RuntimeError):
    """Raised when a read-only call to the adapter fails."""

    pass


class QuoteFailedError(AdapterCallError):
    """Raised when the adapter cannot produce a fee quote. Safe to retry."""

    pass


class QuoteTimeoutError(QuoteFailedError, TimeoutError):
    """Raised when a fee quote request times out. Safe to retry."""

    pass


class FeeQuoteMismatchError(DeploymentError, ValueError):
    """Raised when a fee quote is not index-aligned with the staged targets."""

    pass


class FeeLimitExceededError(DeploymentError, ValueError):
    """Raised when the quoted total exceeds the caller's spending cap."""

    pass


class SubmissionFailedError(DeploymentError, RuntimeError):
    """Raised when the adapter definitively rejected a deploy submission."""

    pass


class AmbiguousSubmissionError(DeploymentError, RuntimeError):
    """
    Raised when a payment-bearing submission has an unknown outcome.

    The transaction may or may not have landed. Retrying could pay twice.
    """

    pass


class SessionClosedError(DeploymentError, RuntimeError):
    """Raised when operating on a session that has already been submitted."""

    pass
