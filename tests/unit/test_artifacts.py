"""Unit tests for build-artifact resolution."""

from pathlib import Path

import pytest

from multichain_deployer.artifacts import ForgeArtifactResolver, parse_contract_identifier
from multichain_deployer.exceptions import BytecodeNotFoundError

COUNTER_BYTECODE = bytes.fromhex("6080604052348015600f57600080fd5b50")


class TestParseContractIdentifier:
    """Test splitting contract identifiers."""

    def test_file_only(self):
        assert parse_contract_identifier("Counter.sol") == ("Counter.sol", None)

    def test_file_and_contract(self):
        assert parse_contract_identifier("Tokens.sol:TokenA") == ("Tokens.sol", "TokenA")

    @pytest.mark.parametrize("identifier", ["", ":TokenA", "Tokens.sol:"])
    def test_malformed_identifiers(self, identifier):
        with pytest.raises(BytecodeNotFoundError):
            parse_contract_identifier(identifier)


class TestForgeArtifactResolver:
    """Test reading bytecode from Foundry build output."""

    def test_reads_bytecode_by_file_name(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        assert resolver.get_code("Counter.sol") == COUNTER_BYTECODE

    def test_reads_bytecode_by_explicit_name(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        assert resolver.get_code("Tokens.sol:TokenA") == b"\x60\x01"
        assert resolver.get_code("Tokens.sol:TokenB") == b"\x60\x02"

    def test_single_artifact_used_when_name_omitted(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        assert resolver.get_code("Legacy.sol") == b"\x60\x03"

    def test_ambiguous_file_raises(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="Ambiguous"):
            resolver.get_code("Tokens.sol")

    def test_missing_file_raises(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError):
            resolver.get_code("Missing.sol")

    def test_missing_contract_raises(self, forge_out: Path):
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="TokenC"):
            resolver.get_code("Tokens.sol:TokenC")

    def test_empty_bytecode_raises(self, forge_out: Path):
        """Interfaces compile to empty bytecode and cannot be deployed."""
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="No creation bytecode"):
            resolver.get_code("Interface.sol")

    def test_unlinked_bytecode_raises(self, forge_out: Path):
        artifact_dir = forge_out / "Linked.sol"
        artifact_dir.mkdir()
        (artifact_dir / "Linked.json").write_text(
            '{"bytecode": {"object": "0x73__$abcdef$__6000"}}'
        )
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="Unusable"):
            resolver.get_code("Linked.sol")

    def test_corrupted_artifact_raises(self, forge_out: Path):
        artifact_dir = forge_out / "Broken.sol"
        artifact_dir.mkdir()
        (artifact_dir / "Broken.json").write_text("{ invalid json")
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="Corrupted"):
            resolver.get_code("Broken.sol")

    def test_out_dir_from_environment(self, forge_out: Path, monkeypatch):
        monkeypatch.setenv("FOUNDRY_OUT", str(forge_out))

        resolver = ForgeArtifactResolver()

        assert resolver.out_dir == forge_out.absolute()
        assert resolver.get_code("Counter.sol:Counter") == COUNTER_BYTECODE

    def test_out_dir_defaults_to_cwd_out(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("FOUNDRY_OUT", raising=False)
        monkeypatch.chdir(tmp_path)

        resolver = ForgeArtifactResolver()

        assert resolver.out_dir == Path.cwd() / "out"

    def test_non_object_artifact_raises(self, forge_out: Path):
        artifact_dir = forge_out / "Listed.sol"
        artifact_dir.mkdir()
        (artifact_dir / "Listed.json").write_text("[1, 2, 3]")
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError, match="not a JSON object"):
            resolver.get_code("Listed.sol")

    @pytest.mark.parametrize("bytecode", ['{"object": 123}', "123", '{"object": null}', "[]"])
    def test_non_string_bytecode_raises(self, forge_out: Path, bytecode):
        artifact_dir = forge_out / "Odd.sol"
        artifact_dir.mkdir()
        (artifact_dir / "Odd.json").write_text(f'{{"bytecode": {bytecode}}}')
        resolver = ForgeArtifactResolver(forge_out)

        with pytest.raises(BytecodeNotFoundError):
            resolver.get_code("Odd.sol")
