"""Network name to domain id catalog."""

from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Tuple, Union

from .constants import DOMAIN_IDS, MAX_DOMAIN_ID, UNRESOLVED_DOMAIN_ID
from .exceptions import DuplicateNetworkError, UnknownNetworkError

CatalogEntries = Union[Mapping[str, int], Iterable[Tuple[str, int]]]


class NetworkCatalog:
    """Immutable mapping from human-readable network names to domain ids."""

    def __init__(self, entries: CatalogEntries):
        """
        Build the catalog once from a static table.

        Args:
            entries: Mapping or iterable of (name, domain_id) pairs

        Raises:
            DuplicateNetworkError: If a name is registered with two different ids
            ValueError: If a domain id does not fit in a uint8
        """
        if isinstance(entries, Mapping):
            entries = entries.items()

        table = {}
        for name, domain_id in entries:
            if (
                isinstance(domain_id, bool)
                or not isinstance(domain_id, int)
                or not 0 <= domain_id <= MAX_DOMAIN_ID
            ):
                raise ValueError(
                    f"Domain id for '{name}' must be an integer in 0..{MAX_DOMAIN_ID}, "
                    f"got {domain_id!r}"
                )
            # Repeating an identical entry is harmless
            if name in table and table[name] != domain_id:
                raise DuplicateNetworkError(
                    f"Network '{name}' registered with conflicting domain ids "
                    f"{table[name]} and {domain_id}"
                )
            table[name] = domain_id

        self._table = MappingProxyType(table)

    def resolve(self, name: str) -> int:
        """
        Resolve a network name to its domain id.

        Raises:
            UnknownNetworkError: If the name is absent or mapped to the reserved zero id
        """
        domain_id = self._table.get(name, UNRESOLVED_DOMAIN_ID)
        if domain_id == UNRESOLVED_DOMAIN_ID:
            raise UnknownNetworkError(f"Network '{name}' has no registered domain id")
        return domain_id

    def names(self) -> List[str]:
        return sorted(self._table)

    def as_mapping(self) -> Mapping[str, int]:
        return self._table

    def __contains__(self, name: object) -> bool:
        return self._table.get(name, UNRESOLVED_DOMAIN_ID) != UNRESOLVED_DOMAIN_ID

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"NetworkCatalog({dict(self._table)!r})"


def default_catalog() -> NetworkCatalog:
    """Return the catalog of networks the deploy adapter is known to serve."""
    return NetworkCatalog(DOMAIN_IDS)
