"""Ordered collection of staged deployment targets."""

import logging
from typing import List, Tuple

from .exceptions import InvalidDeploymentTargetError, UnknownNetworkError
from .networks import NetworkCatalog
from .types import DeploymentTarget

logger = logging.getLogger(__name__)


def _as_bytes(value, field: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidDeploymentTargetError(
        f"{field} must be bytes, got {type(value).__name__}"
    )


class DeploymentTargetSet:
    """
    Append-only, ordered list of deployment targets.

    Each entry holds a domain id together with its constructor arguments and
    init data, so the three sequences handed to the adapter are always
    index-aligned. Order is the order targets were added, which is the order
    fees are quoted in and the order the adapter processes them.
    """

    def __init__(self, catalog: NetworkCatalog):
        self._catalog = catalog
        self._targets: List[DeploymentTarget] = []

    def add_target(self, network: str, constructor_args: bytes, init_data: bytes) -> DeploymentTarget:
        """
        Stage a deployment to one network.

        Args:
            network: Network name, resolved through the catalog
            constructor_args: ABI-encoded constructor arguments
            init_data: Calldata invoked on the contract after deployment

        Returns:
            The staged DeploymentTarget

        Raises:
            InvalidDeploymentTargetError: If the network is unknown or a payload is not bytes.
                Nothing is staged in that case.
        """
        try:
            domain_id = self._catalog.resolve(network)
        except UnknownNetworkError as e:
            raise InvalidDeploymentTargetError(
                f"Cannot stage deployment to '{network}': {e}"
            ) from e

        target = DeploymentTarget(
            domain_id=domain_id,
            constructor_args=_as_bytes(constructor_args, "constructor_args"),
            init_data=_as_bytes(init_data, "init_data"),
        )
        self._targets.append(target)
        logger.debug("Staged %s (domain %d) as target #%d", network, domain_id, len(self._targets) - 1)
        return target

    def size(self) -> int:
        return len(self._targets)

    def is_empty(self) -> bool:
        return not self._targets

    def targets(self) -> Tuple[DeploymentTarget, ...]:
        return tuple(self._targets)

    def snapshot(self) -> Tuple[List[int], List[bytes], List[bytes]]:
        """
        Return (domain_ids, constructor_args, init_datas) as parallel lists.

        The set itself is left untouched, so a failed deploy can be retried.
        """
        domain_ids = [t.domain_id for t in self._targets]
        constructor_args = [t.constructor_args for t in self._targets]
        init_datas = [t.init_data for t in self._targets]
        return domain_ids, constructor_args, init_datas

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self):
        return iter(self.targets())
