"""Unit tests for adapter call encoding."""

from eth_abi import decode as abi_decode
from eth_utils import function_signature_to_4byte_selector

from multichain_deployer.adapter import encode_calculate_deploy_fee, encode_call, encode_deploy
from multichain_deployer.constants import CALCULATE_DEPLOY_FEE_SIGNATURE, DEPLOY_SIGNATURE
from multichain_deployer.networks import NetworkCatalog
from multichain_deployer.targets import DeploymentTargetSet
from multichain_deployer.types import FeeQuote

SALT = bytes(range(32))


def staged_targets() -> DeploymentTargetSet:
    targets = DeploymentTargetSet(NetworkCatalog({"sepolia": 2, "mumbai": 7}))
    targets.add_target("sepolia", b"args_a", b"init_a")
    targets.add_target("mumbai", b"args_b", b"init_b")
    return targets


class TestEncodeCall:
    """Test generic call encoding."""

    def test_selector_prefix(self):
        data = encode_call("transfer(address,uint256)", ["0x" + "11" * 20, 5])

        assert data[:4] == bytes.fromhex("a9059cbb")
        assert len(data) == 4 + 64

    def test_no_arguments(self):
        assert encode_call("totalSupply()", []) == bytes.fromhex("18160ddd")


class TestAdapterCalldata:
    """Test the adapter's fee and deploy calldata."""

    def test_calculate_deploy_fee_layout(self):
        data = encode_calculate_deploy_fee(b"\x60\x80", 300000, SALT, True, staged_targets())

        assert data[:4] == function_signature_to_4byte_selector(CALCULATE_DEPLOY_FEE_SIGNATURE)
        decoded = abi_decode(
            ["bytes", "uint256", "bytes32", "bool", "bytes[]", "bytes[]", "uint8[]"], data[4:]
        )
        assert decoded[0] == b"\x60\x80"
        assert decoded[1] == 300000
        assert decoded[2] == SALT
        assert decoded[3] is True
        assert list(decoded[4]) == [b"args_a", b"args_b"]
        assert list(decoded[5]) == [b"init_a", b"init_b"]
        assert list(decoded[6]) == [2, 7]

    def test_deploy_carries_fees(self):
        data = encode_deploy(b"\x60\x80", 300000, SALT, False, staged_targets(), FeeQuote(fees=(100, 250)))

        assert data[:4] == function_signature_to_4byte_selector(DEPLOY_SIGNATURE)
        decoded = abi_decode(
            ["bytes", "uint256", "bytes32", "bool", "bytes[]", "bytes[]", "uint8[]", "uint256[]"],
            data[4:],
        )
        assert decoded[3] is False
        assert list(decoded[6]) == [2, 7]
        assert list(decoded[7]) == [100, 250]
