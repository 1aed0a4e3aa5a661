"""
Load benchmark config from environment (.env supported).
Defaults reproduce the stock BSC mainnet/testnet sync benchmark.
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _get(key: str, default: Optional[str] = None) -> str:
    v = os.environ.get(key, default)
    if v is None:
        raise ValueError(f"Missing required env: {key}")
    return v.strip()


def _get_float(key: str, default: float) -> float:
    try:
        return float(os.environ.get(key, str(default)))
    except (TypeError, ValueError):
        return default


def _get_int(key: str, default: int) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except (TypeError, ValueError):
        return default


def _get_list(key: str, default: List[str]) -> List[str]:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# Chains
CHAIN_MAINNET = "bsc"
CHAIN_TESTNET = "bsc-testnet"
SUPPORTED_CHAINS = (CHAIN_MAINNET, CHAIN_TESTNET)

DEFAULT_BLOCK_NOTATION = "5M"
DEFAULT_CHAIN = CHAIN_MAINNET

# RPC (priority = list order)
MAINNET_RPC_ENDPOINTS: List[str] = _get_list(
    "BSC_RPC_ENDPOINTS",
    [
        "https://bsc-dataseed.binance.org/",
        "https://bsc-dataseed1.defibit.io/",
        "https://bsc-dataseed1.ninicoin.io/",
        "https://bsc-dataseed2.defibit.io/",
    ],
)
TESTNET_RPC_ENDPOINTS: List[str] = _get_list(
    "BSC_TESTNET_RPC_ENDPOINTS",
    [
        "https://data-seed-prebsc-1-s1.binance.org:8545/",
        "https://data-seed-prebsc-2-s1.binance.org:8545/",
        "https://data-seed-prebsc-1-s2.binance.org:8545/",
        "https://data-seed-prebsc-2-s2.binance.org:8545/",
    ],
)
RPC_TIMEOUT: float = _get_float("RPC_TIMEOUT", 30.0)

# Report
RESULTS_DIR: str = _get("RESULTS_DIR", "./test_results")
REPORT_PREFIX: str = _get("REPORT_PREFIX", "bsc")

# Build / node
NODE_BIN_NAME: str = _get("NODE_BIN_NAME", "reth-bsc")
NODE_BINARY: str = _get("NODE_BINARY", f"./target/release/{NODE_BIN_NAME}")
NODE_RUST_LOG: str = _get("NODE_RUST_LOG", "INFO")
LINUX_RUSTFLAGS: str = _get("LINUX_RUSTFLAGS", "-C link-arg=-lgcc")
HTTP_API: str = _get("HTTP_API", "eth, net, txpool, web3, rpc")
METRICS_ADDR: str = _get("METRICS_ADDR", "0.0.0.0:6060")
LOG_FILE_MAX_SIZE: int = _get_int("LOG_FILE_MAX_SIZE", 1000)
LOG_FILE_MAX_FILES: int = _get_int("LOG_FILE_MAX_FILES", 1000)
TRUSTED_PEERS: List[str] = _get_list(
    "TRUSTED_PEERS",
    [
        "enode://551c8009f1d5bbfb1d64983eeb4591e51ad488565b96cdde7e40a207cfd6c8efa5b5a7fa88ed4e71229c988979e4c720891287ddd7d00ba114408a3ceb972ccb@34.245.203.3:30311",
        "enode://c637c90d6b9d1d0038788b163a749a7a86fed2e7d0d13e5dc920ab144bb432ed1e3e00b54c1a93cecba479037601ba9a5937a88fe0be949c651043473c0d1e5b@34.244.120.206:30311",
        "enode://bac6a548c7884270d53c3694c93ea43fa87ac1c7219f9f25c9d57f6a2fec9d75441bc4bad1e81d78c049a1c4daf3b1404e2bbb5cd9bf60c0f3a723bbaea110bc@3.255.117.110:30311",
        "enode://94e56c84a5a32e2ef744af500d0ddd769c317d3c3dd42d50f5ea95f5f3718a5f81bc5ce32a7a3ea127bc0f10d3f88f4526a67f5b06c1d85f9cdfc6eb46b2b375@3.255.231.219:30311",
        "enode://5d54b9a5af87c3963cc619fe4ddd2ed7687e98363bfd1854f243b71a2225d33b9c9290e047d738e0c7795b4bc78073f0eb4d9f80f572764e970e23d02b3c2b1f@34.245.16.210:30311",
        "enode://41d57b0f00d83016e1bb4eccff0f3034aa49345301b7be96c6bb23a0a852b9b87b9ed11827c188ad409019fb0e578917d722f318665f198340b8a15ae8beff36@34.245.72.231:30311",
        "enode://1bb269476f62e99d17da561b1a6b0d0269b10afee029e1e9fdee9ac6a0e342ae562dfa8578d783109b80c0f100a19e03b057f37b2aff22d8a0aceb62020018fe@54.78.102.178:30311",
        "enode://3c13113538f3ca7d898d99f9656e0939451558758fd9c9475cff29f020187a56e8140bd24bd57164b07c3d325fc53e1ef622f793851d2648ed93d9d5a7ce975c@34.254.238.155:30311",
        "enode://d19fd92e4f061d82a92e32d377c568494edcc36883a02e9d527b69695b6ae9e857f1ace10399c2aee4f71f5885ca3fe6342af78c71ad43ec1ca890deb6aaf465@34.247.29.116:30311",
        "enode://c014bbf48209cdf8ca6d3bf3ff5cf2fade45104283dcfc079df6c64e0f4b65e4afe28040fa1731a0732bd9cbb90786cf78f0174b5de7bd5b303088e80d8e6a83@54.74.101.143:30311",
    ],
)

# Logging
LOG_LEVEL: str = _get("LOG_LEVEL", "INFO").upper()
