import pytest

from precog.config import get_settings
from precog.contracts.registry import get_registry

MASTER_ADDRESS = "0x" + "11" * 20
ORACLE_ADDRESS = "0x" + "22" * 20
TOKEN_ADDRESS = "0x" + "33" * 20
OLD_MASTER_ADDRESS = "0x" + "44" * 20

MASTER_ABI = [
    {
        "type": "function",
        "name": "marketBuyPrice",
        "stateMutability": "view",
        "inputs": [
            {"name": "marketId", "type": "uint256"},
            {"name": "outcome", "type": "uint256"},
            {"name": "sharesAmount", "type": "int128"},
        ],
        "outputs": [{"name": "", "type": "int128"}],
    },
    {
        "type": "event",
        "name": "SharesBought",
        "inputs": [],
    },
]


@pytest.fixture
def contracts_table():
    return {
        "84532": {
            "PrecogMasterV7": {"address": MASTER_ADDRESS, "abi": MASTER_ABI},
            "PrecogRealityOracleV2": {"address": ORACLE_ADDRESS, "abi": []},
            "MateToken": {"address": TOKEN_ADDRESS, "abi": []},
            "PrecogMasterV6": {"address": OLD_MASTER_ADDRESS, "abi": []},
        },
        "31337": {
            "MateToken": {"address": TOKEN_ADDRESS, "abi": []},
        },
    }


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in (
        "ALCHEMY_API_KEY",
        "QUICKNODE_ENDPOINT_NAME",
        "QUICKNODE_API_KEY",
        "RPC_OVERRIDES",
        "TARGET_NETWORKS",
        "POLLING_INTERVAL_MS",
        "LOCAL_CHAIN_ID",
        "CONTRACTS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()
