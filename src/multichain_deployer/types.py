"""Data types and dataclasses for multichain-deployer library."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class DeploymentState(Enum):
    """
    Lifecycle of one multichain deployment session.

    - EMPTY: no targets staged
    - STAGED: at least one target staged, nothing submitted
    - QUOTED: fee quote obtained, submission in flight
    - SUBMITTED: adapter accepted the payment (terminal)
    - UNCERTAIN: submission outcome unknown, caller must resolve
    """

    EMPTY = "empty"
    STAGED = "staged"
    QUOTED = "quoted"
    SUBMITTED = "submitted"
    UNCERTAIN = "uncertain"


@dataclass(frozen=True)
class DeploymentTarget:
    """One network leg of a multichain deployment."""

    domain_id: int
    constructor_args: bytes
    init_data: bytes


@dataclass(frozen=True)
class FeeQuote:
    """Per-target fees, index-aligned with the target set they were quoted for."""

    fees: Tuple[int, ...]

    @property
    def total(self) -> int:
        # Python ints are arbitrary precision, no overflow at uint256 scale
        total = 0
        for fee in self.fees:
            total += fee
        return total

    def __len__(self) -> int:
        return len(self.fees)


@dataclass(frozen=True)
class DeployReceipt:
    """Information about an accepted multichain deploy submission."""

    transaction_hash: str
    domain_ids: List[int]
    fees: List[int]
    total_fee: int
    salt: bytes
