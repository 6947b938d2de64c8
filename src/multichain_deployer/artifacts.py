"""Build-artifact resolution for contract creation bytecode."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple, Union

from eth_utils import decode_hex

from .constants import DEFAULT_FOUNDRY_OUT, FOUNDRY_OUT_ENV
from .exceptions import BytecodeNotFoundError


def parse_contract_identifier(identifier: str) -> Tuple[str, Optional[str]]:
    """
    Split a contract identifier into source file and contract name.

    Args:
        identifier: "File.sol" or "File.sol:ContractName"

    Returns:
        Tuple of (file_name, contract_name); contract_name is None when omitted

    Raises:
        BytecodeNotFoundError: If the identifier is malformed
    """
    file_name, sep, contract_name = identifier.partition(":")
    if not file_name or (sep and not contract_name):
        raise BytecodeNotFoundError(f"Malformed contract identifier '{identifier}'")
    return file_name, contract_name or None


class ArtifactResolver(ABC):
    """Resolves a contract identifier to its creation bytecode."""

    @abstractmethod
    def get_code(self, identifier: str) -> bytes:
        """
        Raises:
            BytecodeNotFoundError: If no bytecode exists for the identifier
        """


class ForgeArtifactResolver(ArtifactResolver):
    """Reads creation bytecode from a Foundry build output directory."""

    def __init__(self, out_dir: Optional[Union[Path, str]] = None):
        """
        Args:
            out_dir: Foundry output directory (defaults to $FOUNDRY_OUT, then ./out)
        """
        if out_dir is None:
            out_dir = os.environ.get(FOUNDRY_OUT_ENV, DEFAULT_FOUNDRY_OUT)
        self.out_dir = Path(out_dir).absolute()

    def artifact_path(self, identifier: str) -> Path:
        """
        Locate the artifact JSON for an identifier.

        Without an explicit contract name, the artifact named after the file stem
        is preferred, then the only artifact in the file's directory.
        """
        file_name, contract_name = parse_contract_identifier(identifier)
        source_dir = self.out_dir / file_name
        if not source_dir.is_dir():
            raise BytecodeNotFoundError(
                f"No build output for '{file_name}' in {self.out_dir}"
            )

        if contract_name is not None:
            path = source_dir / f"{contract_name}.json"
            if not path.exists():
                raise BytecodeNotFoundError(
                    f"Contract '{contract_name}' not found in build output for '{file_name}'"
                )
            return path

        default = source_dir / f"{Path(file_name).stem}.json"
        if default.exists():
            return default

        candidates = sorted(source_dir.glob("*.json"))
        if len(candidates) != 1:
            raise BytecodeNotFoundError(
                f"Ambiguous identifier '{identifier}': {len(candidates)} artifacts found, "
                "use 'File.sol:ContractName'"
            )
        return candidates[0]

    def get_code(self, identifier: str) -> bytes:
        path = self.artifact_path(identifier)
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise BytecodeNotFoundError(f"Corrupted artifact {path}: {e}") from e

        if not isinstance(data, dict):
            raise BytecodeNotFoundError(f"Artifact {path} is not a JSON object")

        # Foundry nests the hex under "object", older formats store it directly
        bytecode = data.get("bytecode")
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object")

        if not isinstance(bytecode, str) or bytecode in ("", "0x", "0x0"):
            raise BytecodeNotFoundError(f"No creation bytecode in {path}")

        try:
            return decode_hex(bytecode)
        except (TypeError, ValueError) as e:
            # Unlinked libraries leave placeholders in the hex
            raise BytecodeNotFoundError(f"Unusable bytecode in {path}: {e}") from e
