"""Per-session salt derivation."""

import os
import time
from typing import Callable

from eth_abi.packed import encode_packed
from eth_utils import keccak, to_checksum_address

from .constants import SALT_LENGTH


class SaltGenerator:
    """
    Derives 32-byte deployment salts.

    Each salt is the keccak256 of environment entropy, the current timestamp,
    the caller address and a counter that advances on every call. Distinct
    counter values give distinct salts within a session. This is best-effort
    uniqueness: whoever controls the entropy and clock controls the output.
    """

    def __init__(
        self,
        caller: str,
        entropy: Callable[[int], bytes] = os.urandom,
        clock: Callable[[], float] = time.time,
    ):
        self.caller = to_checksum_address(caller)
        self._entropy = entropy
        self._clock = clock
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def next(self) -> bytes:
        seed = self._entropy(SALT_LENGTH)
        timestamp = int(self._clock())
        packed = encode_packed(
            ["bytes32", "uint256", "address", "uint256"],
            [seed, timestamp, self.caller, self._counter],
        )
        self._counter += 1
        return keccak(packed)

    def __iter__(self):
        return self

    def __next__(self) -> bytes:
        return self.next()
