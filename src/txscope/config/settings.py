import os
from dotenv import load_dotenv
load_dotenv()

# ---- EVM RPC endpoints ----
ETH_RPC_URL = os.environ.get("ETH_RPC_URL", "https://eth.llamarpc.com")
BASE_RPC_URL = os.environ.get("BASE_RPC_URL", "https://mainnet.base.org")
ARBITRUM_RPC_URL = os.environ.get("ARBITRUM_RPC_URL", "https://arb1.arbitrum.io/rpc")
AVAX_RPC_URL = os.environ.get("AVAX_RPC_URL", "https://api.avax.network/ext/bc/C/rpc")
POLYGON_RPC_URL = os.environ.get("POLYGON_RPC_URL", "https://polygon-rpc.com")
OPTIMISM_RPC_URL = os.environ.get("OPTIMISM_RPC_URL", "https://optimism.drpc.org")
UNICHAIN_RPC_URL = os.environ.get("UNICHAIN_RPC_URL", "https://rpc.unichain.io")

# ---- Solana RPC endpoints ----
SOLANA_MAINNET_RPC_URL = os.environ.get("SOLANA_MAINNET_RPC_URL", "https://api.mainnet-beta.solana.com")
SOLANA_DEVNET_RPC_URL = os.environ.get("SOLANA_DEVNET_RPC_URL", "https://api.devnet.solana.com")
SOLANA_COMMITMENT = os.environ.get("SOLANA_COMMITMENT", "confirmed")

# ---- Transport ----
RPC_TIMEOUT_SEC = float(os.environ.get("RPC_TIMEOUT_SEC", "15"))
RPC_MAX_RETRIES = int(os.environ.get("RPC_MAX_RETRIES", "3"))
RPC_REQUESTS_PER_SEC = float(os.environ.get("RPC_REQUESTS_PER_SEC", "5.0"))

# ---- Logging ----
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
