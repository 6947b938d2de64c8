"""Boundary to the remote multichain deploy adapter."""

import itertools
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Type

import requests
from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex, function_signature_to_4byte_selector, to_checksum_address

from .constants import (
    ADAPTER_ADDRESS_ENV,
    CALCULATE_DEPLOY_FEE_RETURNS,
    CALCULATE_DEPLOY_FEE_SIGNATURE,
    COMPUTE_ADDRESS_RETURNS,
    COMPUTE_ADDRESS_SIGNATURE,
    DEFAULT_ADAPTER_ADDRESS,
    DEFAULT_QUOTE_TIMEOUT,
    DEFAULT_SUBMIT_TIMEOUT,
    DEPLOY_SIGNATURE,
    RPC_URL_ENV,
    SENDER_ENV,
)
from .exceptions import (
    AdapterCallError,
    AmbiguousSubmissionError,
    QuoteFailedError,
    QuoteTimeoutError,
    SubmissionFailedError,
)
from .targets import DeploymentTargetSet
from .types import DeployReceipt, FeeQuote

logger = logging.getLogger(__name__)


class AdapterClient(ABC):
    """
    Capability interface to the deploy adapter service.

    Implementations: :class:`JsonRpcAdapterClient` for a live node,
    :class:`multichain_deployer.testing.SimulatedAdapterClient` for tests.
    """

    @abstractmethod
    def quote_fees(
        self,
        bytecode: bytes,
        gas_limit: int,
        salt: bytes,
        is_unique_per_chain: bool,
        targets: DeploymentTargetSet,
    ) -> FeeQuote:
        """
        Ask the adapter what deploying to every staged target costs.

        Pure query, no payment.

        Raises:
            QuoteFailedError: On any network or protocol error
        """

    @abstractmethod
    def submit_deploy(
        self,
        bytecode: bytes,
        gas_limit: int,
        salt: bytes,
        is_unique_per_chain: bool,
        targets: DeploymentTargetSet,
        fee_quote: FeeQuote,
        total_payment: int,
    ) -> DeployReceipt:
        """
        Pay the adapter and request deployment to every staged target.

        Not idempotent.

        Raises:
            SubmissionFailedError: If the adapter definitively rejected the call
            AmbiguousSubmissionError: If the outcome is unknown
        """

    @abstractmethod
    def compute_contract_address_for_chain(
        self, sender: str, salt: bytes, is_unique_per_chain: bool, domain_id: int
    ) -> str:
        """
        Predict where the adapter will create the contract on a destination domain.

        Raises:
            AdapterCallError: On any network or protocol error
        """


def encode_call(signature: str, args: Sequence[Any]) -> bytes:
    """
    ABI-encode a function call.

    Args:
        signature: Canonical signature, e.g. "transfer(address,uint256)"
        args: Argument values in declaration order

    Returns:
        4-byte selector followed by the encoded arguments
    """
    arg_types = signature[signature.index("(") + 1 : -1]
    types = arg_types.split(",") if arg_types else []
    return function_signature_to_4byte_selector(signature) + abi_encode(types, list(args))


def encode_calculate_deploy_fee(
    bytecode: bytes, gas_limit: int, salt: bytes, is_unique_per_chain: bool, targets: DeploymentTargetSet
) -> bytes:
    domain_ids, constructor_args, init_datas = targets.snapshot()
    return encode_call(
        CALCULATE_DEPLOY_FEE_SIGNATURE,
        [bytecode, gas_limit, salt, is_unique_per_chain, constructor_args, init_datas, domain_ids],
    )


def encode_deploy(
    bytecode: bytes,
    gas_limit: int,
    salt: bytes,
    is_unique_per_chain: bool,
    targets: DeploymentTargetSet,
    fee_quote: FeeQuote,
) -> bytes:
    domain_ids, constructor_args, init_datas = targets.snapshot()
    return encode_call(
        DEPLOY_SIGNATURE,
        [
            bytecode,
            gas_limit,
            salt,
            is_unique_per_chain,
            constructor_args,
            init_datas,
            domain_ids,
            list(fee_quote.fees),
        ],
    )


class JsonRpcAdapterClient(AdapterClient):
    """Reaches the adapter contract through an Ethereum JSON-RPC endpoint."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        adapter_address: Optional[str] = None,
        sender: Optional[str] = None,
        quote_timeout: float = DEFAULT_QUOTE_TIMEOUT,
        submit_timeout: float = DEFAULT_SUBMIT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            rpc_url: JSON-RPC endpoint (defaults to $DEPLOYER_RPC_URL)
            adapter_address: Adapter contract (defaults to $DEPLOY_ADAPTER_ADDRESS,
                then the well-known adapter address)
            sender: Unlocked account paying for submissions (defaults to $DEPLOYER_SENDER)
            quote_timeout: Seconds to wait for read-only calls
            submit_timeout: Seconds to wait for a submission to be acknowledged
            session: Optional requests session to reuse connections

        Raises:
            ValueError: If no RPC URL is configured
        """
        if rpc_url is None:
            rpc_url = os.environ.get(RPC_URL_ENV)
        if rpc_url is None:
            raise ValueError(
                f"RPC URL required: set ${RPC_URL_ENV} environment variable "
                "or pass rpc_url parameter"
            )

        if adapter_address is None:
            adapter_address = os.environ.get(ADAPTER_ADDRESS_ENV, DEFAULT_ADAPTER_ADDRESS)
        if sender is None:
            sender = os.environ.get(SENDER_ENV)

        self.rpc_url = rpc_url
        self.adapter_address = to_checksum_address(adapter_address)
        self.sender = to_checksum_address(sender) if sender else None
        self.quote_timeout = quote_timeout
        self.submit_timeout = submit_timeout
        self.session = session or requests.Session()
        self._ids = itertools.count(1)

    def _post(self, method: str, params: List[Any], timeout: float) -> requests.Response:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        return self.session.post(self.rpc_url, json=payload, timeout=timeout)

    def _call_transaction(self, data: bytes) -> Dict[str, str]:
        tx = {"to": self.adapter_address, "data": encode_hex(data)}
        if self.sender:
            tx["from"] = self.sender
        return tx

    def _eth_call(
        self,
        data: bytes,
        return_types: List[str],
        error_cls: Type[AdapterCallError] = AdapterCallError,
        timeout_cls: Type[AdapterCallError] = AdapterCallError,
    ) -> tuple:
        """Run a read-only adapter call and decode its return values."""
        logger.debug("eth_call to adapter %s with %d bytes of calldata", self.adapter_address, len(data))
        try:
            response = self._post("eth_call", [self._call_transaction(data), "latest"], self.quote_timeout)
        except requests.Timeout as e:
            raise timeout_cls(f"Adapter call timed out after {self.quote_timeout}s: {e}") from e
        except requests.RequestException as e:
            raise error_cls(f"Network error during adapter call: {e}") from e

        if response.status_code != 200:
            raise error_cls(f"RPC request failed with status {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise error_cls(f"Malformed RPC response: {e}") from e

        if not isinstance(result, dict):
            raise error_cls(f"Malformed RPC response: expected an object, got {result!r}")

        if "error" in result:
            raise error_cls(f"RPC error: {result['error']}")

        try:
            return abi_decode(return_types, decode_hex(result["result"]))
        except (KeyError, TypeError, ValueError, DecodingError) as e:
            raise error_cls(f"Cannot decode adapter response: {e}") from e

    def quote_fees(
        self,
        bytecode: bytes,
        gas_limit: int,
        salt: bytes,
        is_unique_per_chain: bool,
        targets: DeploymentTargetSet,
    ) -> FeeQuote:
        data = encode_calculate_deploy_fee(bytecode, gas_limit, salt, is_unique_per_chain, targets)
        (fees,) = self._eth_call(
            data,
            CALCULATE_DEPLOY_FEE_RETURNS,
            error_cls=QuoteFailedError,
            timeout_cls=QuoteTimeoutError,
        )
        return FeeQuote(fees=tuple(fees))

    def compute_contract_address_for_chain(
        self, sender: str, salt: bytes, is_unique_per_chain: bool, domain_id: int
    ) -> str:
        data = encode_call(
            COMPUTE_ADDRESS_SIGNATURE,
            [to_checksum_address(sender), salt, is_unique_per_chain, domain_id],
        )
        (address,) = self._eth_call(data, COMPUTE_ADDRESS_RETURNS)
        return to_checksum_address(address)

    def submit_deploy(
        self,
        bytecode: bytes,
        gas_limit: int,
        salt: bytes,
        is_unique_per_chain: bool,
        targets: DeploymentTargetSet,
        fee_quote: FeeQuote,
        total_payment: int,
    ) -> DeployReceipt:
        if self.sender is None:
            raise SubmissionFailedError(
                f"Sender required to submit: set ${SENDER_ENV} environment variable "
                "or pass sender parameter"
            )

        data = encode_deploy(bytecode, gas_limit, salt, is_unique_per_chain, targets, fee_quote)
        tx = self._call_transaction(data)
        tx["value"] = hex(total_payment)

        logger.info(
            "Submitting deploy to %d domains from %s, paying %d",
            targets.size(),
            self.sender,
            total_payment,
        )
        try:
            response = self._post("eth_sendTransaction", [tx], self.submit_timeout)
        except requests.ConnectTimeout as e:
            # The request never reached the node
            raise SubmissionFailedError(f"Could not connect to {self.rpc_url}: {e}") from e
        except requests.RequestException as e:
            raise AmbiguousSubmissionError(
                f"Deploy submission outcome unknown, check {self.sender} on chain before retrying: {e}"
            ) from e

        if response.status_code >= 500:
            raise AmbiguousSubmissionError(
                f"RPC node answered status {response.status_code}, submission outcome unknown"
            )
        if response.status_code != 200:
            raise SubmissionFailedError(f"RPC request failed with status {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise AmbiguousSubmissionError(f"Malformed RPC response to submission: {e}") from e

        if not isinstance(result, dict):
            raise AmbiguousSubmissionError(
                f"Malformed RPC response to submission, expected an object, got {result!r}"
            )

        if "error" in result:
            raise SubmissionFailedError(f"Adapter rejected deploy: {result['error']}")

        tx_hash = result.get("result")
        if not isinstance(tx_hash, str):
            raise AmbiguousSubmissionError(f"RPC response carries no transaction hash: {result}")

        domain_ids, _, _ = targets.snapshot()
        return DeployReceipt(
            transaction_hash=tx_hash,
            domain_ids=domain_ids,
            fees=list(fee_quote.fees),
            total_fee=total_payment,
            salt=salt,
        )
