"""Staging, fee aggregation and dispatch of one multichain deployment."""

import logging
from typing import Optional, Union

from hexbytes import HexBytes

from .adapter import AdapterClient
from .artifacts import ArtifactResolver
from .constants import SALT_LENGTH
from .exceptions import (
    AmbiguousSubmissionError,
    FeeLimitExceededError,
    FeeQuoteMismatchError,
    NoDeploymentTargetsError,
    SessionClosedError,
    SubmissionFailedError,
)
from .networks import NetworkCatalog, default_catalog
from .targets import DeploymentTargetSet
from .types import DeploymentState, DeploymentTarget, DeployReceipt, FeeQuote

logger = logging.getLogger(__name__)

SaltLike = Union[bytes, bytearray, str]


def _normalize_salt(salt: SaltLike) -> bytes:
    value = bytes(HexBytes(salt))
    if len(value) != SALT_LENGTH:
        raise ValueError(f"Salt must be {SALT_LENGTH} bytes, got {len(value)}")
    return value


def _check_gas_limit(gas_limit: int) -> None:
    if isinstance(gas_limit, bool) or not isinstance(gas_limit, int) or gas_limit <= 0:
        raise ValueError(f"Gas limit must be a positive integer, got {gas_limit!r}")


class DeployOrchestrator:
    """
    One logical deployment of a contract to several networks.

    Targets are staged with :meth:`add_target`. :meth:`deploy` then resolves
    the bytecode, asks the adapter for a fresh fee quote, and submits a single
    deploy call paying exactly the quoted total.

    Failures before or during quoting, and definitive submission rejections,
    leave the session STAGED so the caller may retry. A submission whose
    outcome is unknown moves the session to UNCERTAIN, from which only
    :meth:`resolve_uncertain` leads out.
    """

    def __init__(
        self,
        adapter: AdapterClient,
        artifacts: ArtifactResolver,
        catalog: Optional[NetworkCatalog] = None,
    ):
        self.adapter = adapter
        self.artifacts = artifacts
        self.catalog = catalog if catalog is not None else default_catalog()
        self.targets = DeploymentTargetSet(self.catalog)
        self._submitted = False
        self._uncertain = False
        self._quoting = False
        self.receipt: Optional[DeployReceipt] = None

    @property
    def state(self) -> DeploymentState:
        if self._submitted:
            return DeploymentState.SUBMITTED
        if self._uncertain:
            return DeploymentState.UNCERTAIN
        if self._quoting:
            return DeploymentState.QUOTED
        if self.targets.is_empty():
            return DeploymentState.EMPTY
        return DeploymentState.STAGED

    def _ensure_open(self) -> None:
        if self._submitted:
            raise SessionClosedError("Deployment already submitted")
        if self._uncertain:
            raise AmbiguousSubmissionError(
                "Previous submission outcome is unknown; call resolve_uncertain() first"
            )

    def add_target(self, network: str, constructor_args: bytes, init_data: bytes) -> DeploymentTarget:
        """
        Stage a deployment to `network`.

        Raises:
            InvalidDeploymentTargetError: If the network is unknown; nothing is staged
            SessionClosedError: If the deployment was already submitted
        """
        if self._submitted or self._uncertain:
            raise SessionClosedError(f"Cannot add targets in state {self.state.value}")
        return self.targets.add_target(network, constructor_args, init_data)

    def _prepare(self, contract: str, gas_limit: int, salt: SaltLike):
        self._ensure_open()
        if self.targets.is_empty():
            raise NoDeploymentTargetsError("No deployment targets staged")
        _check_gas_limit(gas_limit)
        salt = _normalize_salt(salt)
        bytecode = self.artifacts.get_code(contract)
        return bytecode, salt

    def _fresh_quote(self, bytecode: bytes, gas_limit: int, salt: bytes, is_unique_per_chain: bool) -> FeeQuote:
        fee_quote = self.adapter.quote_fees(bytecode, gas_limit, salt, is_unique_per_chain, self.targets)
        if len(fee_quote) != self.targets.size():
            logger.warning(
                "Adapter quoted %d fees for %d targets", len(fee_quote), self.targets.size()
            )
            raise FeeQuoteMismatchError(
                f"Adapter quoted {len(fee_quote)} fees for {self.targets.size()} targets"
            )
        return fee_quote

    def quote(self, contract: str, gas_limit: int, salt: SaltLike, is_unique_per_chain: bool) -> FeeQuote:
        """
        Preview what deploying to the staged targets would cost.

        The quote is informational; :meth:`deploy` always requests a new one.
        """
        bytecode, salt = self._prepare(contract, gas_limit, salt)
        return self._fresh_quote(bytecode, gas_limit, salt, is_unique_per_chain)

    def deploy(
        self,
        contract: str,
        gas_limit: int,
        salt: SaltLike,
        is_unique_per_chain: bool,
        max_total_fee: Optional[int] = None,
    ) -> DeployReceipt:
        """
        Deploy `contract` to every staged target in one adapter call.

        Args:
            contract: Build artifact identifier, "File.sol" or "File.sol:Name"
            gas_limit: Gas for the deployment on each destination
            salt: 32-byte salt, bytes or hex string
            is_unique_per_chain: Whether addresses should differ across networks
            max_total_fee: Optional spending cap in the native fee unit

        Returns:
            DeployReceipt from the adapter

        Raises:
            NoDeploymentTargetsError: If nothing is staged; the adapter is not contacted
            BytecodeNotFoundError: If the contract cannot be resolved
            QuoteFailedError: If the adapter cannot quote
            FeeQuoteMismatchError: If the quote is not aligned with the targets
            FeeLimitExceededError: If the quoted total exceeds max_total_fee
            SubmissionFailedError: If the adapter rejected the submission
            AmbiguousSubmissionError: If the submission outcome is unknown
            SessionClosedError: If this deployment was already submitted
        """
        bytecode, salt = self._prepare(contract, gas_limit, salt)

        self._quoting = True
        try:
            fee_quote = self._fresh_quote(bytecode, gas_limit, salt, is_unique_per_chain)
            total_fee = fee_quote.total
            if max_total_fee is not None and total_fee > max_total_fee:
                raise FeeLimitExceededError(
                    f"Quoted total {total_fee} exceeds limit {max_total_fee}"
                )

            logger.info(
                "Deploying %s to %d targets for a total fee of %d",
                contract,
                self.targets.size(),
                total_fee,
            )
            receipt = self._submit(
                contract, bytecode, gas_limit, salt, is_unique_per_chain, fee_quote, total_fee
            )
        finally:
            self._quoting = False

        self._submitted = True
        self.receipt = receipt
        logger.info("Deploy of %s submitted in %s", contract, receipt.transaction_hash)
        return receipt

    def _submit(
        self,
        contract: str,
        bytecode: bytes,
        gas_limit: int,
        salt: bytes,
        is_unique_per_chain: bool,
        fee_quote: FeeQuote,
        total_fee: int,
    ) -> DeployReceipt:
        """Submit the paid deploy; anything but a definitive rejection leaves the outcome unknown."""
        try:
            return self.adapter.submit_deploy(
                bytecode,
                gas_limit,
                salt,
                is_unique_per_chain,
                self.targets,
                fee_quote,
                total_fee,
            )
        except SubmissionFailedError:
            raise
        except AmbiguousSubmissionError:
            self._uncertain = True
            logger.warning("Deploy of %s has an unknown outcome, not retrying", contract)
            raise
        except Exception as e:
            self._uncertain = True
            logger.warning("Deploy of %s failed unexpectedly, outcome unknown: %s", contract, e)
            raise AmbiguousSubmissionError(
                f"Deploy submission of {contract} failed with an unexpected error, outcome unknown: {e}"
            ) from e

    def resolve_uncertain(self, landed: bool) -> DeploymentState:
        """
        Record the caller's finding about an uncertain submission.

        Args:
            landed: True if the submission was found on chain, False if it was not

        Returns:
            SUBMITTED if it landed, STAGED otherwise
        """
        if not self._uncertain:
            raise SessionClosedError(f"No uncertain submission to resolve in state {self.state.value}")
        self._uncertain = False
        self._submitted = landed
        logger.info("Uncertain submission resolved as %s", "landed" if landed else "not landed")
        return self.state

    def compute_address_for_chain(
        self, sender: str, salt: SaltLike, is_unique_per_chain: bool, network: str
    ) -> str:
        """Predict the deployment address on `network` as computed by the adapter."""
        domain_id = self.catalog.resolve(network)
        return self.adapter.compute_contract_address_for_chain(
            sender, _normalize_salt(salt), is_unique_per_chain, domain_id
        )
