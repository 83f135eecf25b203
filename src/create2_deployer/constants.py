"""Configuration constants for create2-deployer library."""

# Well-known factory deployment, identical on every network where the
# bootstrap key has been used at nonce 0
FACTORY_ADDRESS = "0x4a27c059fd7e383854ea7de6be9c390a795f6ee3"
DEPLOYER_ADDRESS = "0x2287fa6efdec6d8c3e0f4612ce551decf89a357a"

DEPLOY_FUNCTION = "deploy"
DEPLOY_SIGNATURE = "deploy(bytes,bytes32)"
DEPLOYED_EVENT = "Deployed"
DEPLOYED_EVENT_SIGNATURE = "Deployed(address)"

# Must match the bytecode assembled in factory_code.py
FACTORY_ABI = [
    {
        "type": "function",
        "name": DEPLOY_FUNCTION,
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "code", "type": "bytes", "internalType": "bytes"},
            {"name": "salt", "type": "bytes32", "internalType": "bytes32"},
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": DEPLOYED_EVENT,
        "anonymous": False,
        "inputs": [
            {"name": "addr", "type": "address", "indexed": True, "internalType": "address"},
        ],
    },
]

# Environment variables
DEPLOYER_KEY_ENV = "CREATE2_DEPLOYER_KEY"
RPC_URL_ENV = "ETH_RPC_URL"

# JSON-RPC defaults (seconds)
DEFAULT_RPC_TIMEOUT = 30
DEFAULT_RECEIPT_TIMEOUT = 120
DEFAULT_POLL_INTERVAL = 1.0
