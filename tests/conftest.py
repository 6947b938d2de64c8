"""Shared pytest fixtures for multichain-deployer tests."""

import json
from pathlib import Path
from typing import Dict

import pytest

from multichain_deployer import DeployOrchestrator, NetworkCatalog
from multichain_deployer.testing import InMemoryArtifactResolver, SimulatedAdapterClient

RPC_URL = "http://test-rpc.example.com"
SENDER = "0x1000000000000000000000000000000000000001"
COUNTER_BYTECODE = bytes.fromhex("6080604052348015600f57600080fd5b50")


@pytest.fixture
def catalog() -> NetworkCatalog:
    """Two-network catalog used by the orchestrator scenarios."""
    return NetworkCatalog({"sepolia": 2, "mumbai": 7})


@pytest.fixture
def simulated_adapter() -> SimulatedAdapterClient:
    return SimulatedAdapterClient(fees={2: 100, 7: 250})


@pytest.fixture
def artifacts() -> InMemoryArtifactResolver:
    return InMemoryArtifactResolver({"Counter.sol:Counter": COUNTER_BYTECODE})


@pytest.fixture
def orchestrator(
    simulated_adapter: SimulatedAdapterClient,
    artifacts: InMemoryArtifactResolver,
    catalog: NetworkCatalog,
) -> DeployOrchestrator:
    return DeployOrchestrator(simulated_adapter, artifacts, catalog)


@pytest.fixture
def salt() -> bytes:
    return bytes(range(32))


def _write_artifact(out_dir: Path, file_name: str, contract_name: str, bytecode) -> Path:
    artifact_dir = out_dir / file_name
    artifact_dir.mkdir(parents=True, exist_ok=True)
    path = artifact_dir / f"{contract_name}.json"
    with open(path, "w") as f:
        json.dump({"abi": [], "bytecode": bytecode}, f, indent=2)
    return path


@pytest.fixture
def forge_out(tmp_path: Path) -> Path:
    """Create a Foundry-style build output directory with sample artifacts."""
    out_dir = tmp_path / "out"
    _write_artifact(out_dir, "Counter.sol", "Counter", {"object": "0x" + COUNTER_BYTECODE.hex()})
    _write_artifact(out_dir, "Tokens.sol", "TokenA", {"object": "0x6001"})
    _write_artifact(out_dir, "Tokens.sol", "TokenB", {"object": "0x6002"})
    _write_artifact(out_dir, "Legacy.sol", "OldName", "6003")
    _write_artifact(out_dir, "Interface.sol", "IThing", {"object": "0x"})
    return out_dir


@pytest.fixture
def rpc_env(monkeypatch) -> Dict[str, str]:
    """Point the JSON-RPC client at the mocked endpoint through the environment."""
    env = {"DEPLOYER_RPC_URL": RPC_URL, "DEPLOYER_SENDER": SENDER}
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("DEPLOY_ADAPTER_ADDRESS", raising=False)
    return env
