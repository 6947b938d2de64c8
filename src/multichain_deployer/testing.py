"""In-process stand-ins for the deploy adapter and build artifacts.

Used by the test suite and by callers who want to rehearse a deployment
without a node.

Example::

    from multichain_deployer import DeployOrchestrator
    from multichain_deployer.testing import InMemoryArtifactResolver, SimulatedAdapterClient

    adapter = SimulatedAdapterClient(fees={2: 100, 7: 250})
    artifacts = InMemoryArtifactResolver({"Counter.sol": b"\\x60\\x80"})
    orchestrator = DeployOrchestrator(adapter, artifacts)
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from eth_abi.packed import encode_packed
from eth_utils import encode_hex, keccak, to_checksum_address

from .adapter import AdapterClient
from .artifacts import ArtifactResolver, parse_contract_identifier
from .exceptions import BytecodeNotFoundError, SubmissionFailedError
from .targets import DeploymentTargetSet
from .types import DeployReceipt, FeeQuote

logger = logging.getLogger(__name__)

#: Fee charged for a domain with no explicit price
DEFAULT_SIMULATED_FEE = 10**15


@dataclass
class SubmittedDeploy:
    """A deploy call accepted by :class:`SimulatedAdapterClient`."""

    bytecode: bytes
    gas_limit: int
    salt: bytes
    is_unique_per_chain: bool
    domain_ids: List[int]
    constructor_args: List[bytes]
    init_datas: List[bytes]
    fees: List[int]
    value: int


class SimulatedAdapterClient(AdapterClient):
    """
    Adapter that prices and accepts deployments in memory.

    Failures are injected by assigning exceptions to :attr:`quote_error`
    or :attr:`submit_error`; they are raised on the next call and cleared.
    :attr:`quote_override` replaces the computed fee list as-is.
    """

    def __init__(self, fees: Optional[Mapping[int, int]] = None):
        self.fees: Dict[int, int] = dict(fees or {})
        self.quote_calls = 0
        self.submitted: List[SubmittedDeploy] = []
        self.quote_error: Optional[Exception] = None
        self.submit_error: Optional[Exception] = None
        self.quote_override: Optional[List[int]] = None
        self._nonce = itertools.count()

    @property
    def submit_calls(self) -> int:
        return len(self.submitted)

    def quote_fees(self, bytecode, gas_limit, salt, is_unique_per_chain, targets: DeploymentTargetSet) -> FeeQuote:
        self.quote_calls += 1
        if self.quote_error is not None:
            error, self.quote_error = self.quote_error, None
            raise error
        if self.quote_override is not None:
            return FeeQuote(fees=tuple(self.quote_override))
        domain_ids, _, _ = targets.snapshot()
        return FeeQuote(fees=tuple(self.fees.get(d, DEFAULT_SIMULATED_FEE) for d in domain_ids))

    def submit_deploy(
        self, bytecode, gas_limit, salt, is_unique_per_chain, targets: DeploymentTargetSet, fee_quote, total_payment
    ) -> DeployReceipt:
        if self.submit_error is not None:
            error, self.submit_error = self.submit_error, None
            raise error

        # Mirror the on-chain check: the payment must cover the listed fees exactly
        if total_payment != sum(fee_quote.fees):
            raise SubmissionFailedError(
                f"Payment {total_payment} does not match fees {sum(fee_quote.fees)}"
            )

        domain_ids, constructor_args, init_datas = targets.snapshot()
        self.submitted.append(
            SubmittedDeploy(
                bytecode=bytecode,
                gas_limit=gas_limit,
                salt=salt,
                is_unique_per_chain=is_unique_per_chain,
                domain_ids=domain_ids,
                constructor_args=constructor_args,
                init_datas=init_datas,
                fees=list(fee_quote.fees),
                value=total_payment,
            )
        )
        tx_hash = encode_hex(keccak(salt + next(self._nonce).to_bytes(32, "big")))
        logger.debug("Simulated deploy %s to domains %s", tx_hash, domain_ids)
        return DeployReceipt(
            transaction_hash=tx_hash,
            domain_ids=domain_ids,
            fees=list(fee_quote.fees),
            total_fee=total_payment,
            salt=salt,
        )

    def compute_contract_address_for_chain(self, sender, salt, is_unique_per_chain, domain_id) -> str:
        # Stable stand-in, not the adapter's real derivation
        packed = encode_packed(
            ["address", "bytes32", "uint8"],
            [to_checksum_address(sender), salt, domain_id if is_unique_per_chain else 0],
        )
        return to_checksum_address(keccak(packed)[-20:])


class InMemoryArtifactResolver(ArtifactResolver):
    """Resolves identifiers from a dict keyed by "File.sol" or "File.sol:Name"."""

    def __init__(self, artifacts: Optional[Mapping[str, bytes]] = None):
        self.artifacts: Dict[str, bytes] = dict(artifacts or {})

    def get_code(self, identifier: str) -> bytes:
        if identifier in self.artifacts:
            return self.artifacts[identifier]
        file_name, contract_name = parse_contract_identifier(identifier)
        if contract_name is None:
            matches = [k for k in self.artifacts if k.partition(":")[0] == file_name]
            if len(matches) == 1:
                return self.artifacts[matches[0]]
        raise BytecodeNotFoundError(f"No bytecode for '{identifier}'")
