"""
multichain-deployer: stage one contract deployment and roll it out to several networks
through a multichain deploy adapter
"""

from importlib.metadata import PackageNotFoundError, version

from .adapter import AdapterClient, JsonRpcAdapterClient
from .artifacts import ArtifactResolver, ForgeArtifactResolver, parse_contract_identifier
from .exceptions import (
    AdapterCallError,
    AmbiguousSubmissionError,
    BytecodeNotFoundError,
    DeploymentError,
    DuplicateNetworkError,
    FeeLimitExceededError,
    FeeQuoteMismatchError,
    InvalidDeploymentTargetError,
    NoDeploymentTargetsError,
    QuoteFailedError,
    QuoteTimeoutError,
    SessionClosedError,
    SubmissionFailedError,
    UnknownNetworkError,
)
from .networks import NetworkCatalog, default_catalog
from .orchestrator import DeployOrchestrator
from .salt import SaltGenerator
from .targets import DeploymentTargetSet
from .types import DeploymentState, DeploymentTarget, DeployReceipt, FeeQuote

try:
    __version__ = version("multichain-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeployOrchestrator",
    "DeploymentTargetSet",
    "NetworkCatalog",
    "default_catalog",
    "SaltGenerator",
    "AdapterClient",
    "JsonRpcAdapterClient",
    "ArtifactResolver",
    "ForgeArtifactResolver",
    "parse_contract_identifier",
    "DeploymentState",
    "DeploymentTarget",
    "DeployReceipt",
    "FeeQuote",
    "DeploymentError",
    "UnknownNetworkError",
    "DuplicateNetworkError",
    "InvalidDeploymentTargetError",
    "NoDeploymentTargetsError",
    "BytecodeNotFoundError",
    "AdapterCallError",
    "QuoteFailedError",
    "QuoteTimeoutError",
    "FeeQuoteMismatchError",
    "FeeLimitExceededError",
    "SubmissionFailedError",
    "AmbiguousSubmissionError",
    "SessionClosedError",
]
