"""Configuration constants for multichain-deployer library."""

# Domain identifiers assigned by the adapter ecosystem to each target network.
# Zero is reserved as "unresolved" and never assigned.
DOMAIN_IDS = [
    ("goerli", 1),
    ("sepolia", 2),
    ("cronos-testnet", 5),
    ("holesky", 6),
    ("mumbai", 7),
    ("holesky", 6),
    ("arbitrum-sepolia", 8),
    ("gnosis-chaido", 9),
]

UNRESOLVED_DOMAIN_ID = 0
MAX_DOMAIN_ID = 2**8 - 1  # uint8 on the wire

# The adapter lives at the same address on every supported network
DEFAULT_ADAPTER_ADDRESS = "0x85d62ad850b322152bf4ad9147bfbf097da42217"

# Adapter ABI (function signatures and return types)
CALCULATE_DEPLOY_FEE_SIGNATURE = (
    "calculateDeployFee(bytes,uint256,bytes32,bool,bytes[],bytes[],uint8[])"
)
CALCULATE_DEPLOY_FEE_RETURNS = ["uint256[]"]

DEPLOY_SIGNATURE = "deploy(bytes,uint256,bytes32,bool,bytes[],bytes[],uint8[],uint256[])"

COMPUTE_ADDRESS_SIGNATURE = "computeContractAddressForChain(address,bytes32,bool,uint8)"
COMPUTE_ADDRESS_RETURNS = ["address"]

# Environment variables consulted when a parameter is not given
RPC_URL_ENV = "DEPLOYER_RPC_URL"
ADAPTER_ADDRESS_ENV = "DEPLOY_ADAPTER_ADDRESS"
SENDER_ENV = "DEPLOYER_SENDER"
FOUNDRY_OUT_ENV = "FOUNDRY_OUT"

DEFAULT_FOUNDRY_OUT = "out"

# Seconds
DEFAULT_QUOTE_TIMEOUT = 30
DEFAULT_SUBMIT_TIMEOUT = 60

SALT_LENGTH = 32
