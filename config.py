"""
Shared configuration for the AI Vending Machine.

Everything is read from the environment once (after loading .env) into an
immutable Settings snapshot.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Network configuration
NETWORKS = {
    "arc-testnet": {"chain_id": 5042002, "usdc": "0x3600000000000000000000000000000000000000"},
    "base-sepolia": {"chain_id": 84532, "usdc": "0x036CbD53842c5426634e7929541eC2318f3dCF7e"},
    "base": {"chain_id": 8453, "usdc": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"},
}

# Default network
DEFAULT_NETWORK = "arc-testnet"

# USDC EIP-712 domain
USDC_NAME = "USDC"
USDC_VERSION = "2"
USDC_DECIMALS = 6

DEFAULT_FACILITATOR_URL = "https://api.thirdweb.com/v1/payments/x402"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"

# Every paid query costs the same
QUERY_PRICE = "$0.10"

PLACEHOLDER_MARKER = "your_"


class Credential(Enum):
    PRESENT = "present"
    ABSENT_OR_PLACEHOLDER = "absent_or_placeholder"


def classify_credential(value: Optional[str]) -> Credential:
    """Unset, blank and template values ("your_..._here") count as absent."""
    if value is None or not value.strip():
        return Credential.ABSENT_OR_PLACEHOLDER
    if PLACEHOLDER_MARKER in value:
        return Credential.ABSENT_OR_PLACEHOLDER
    return Credential.PRESENT


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    thirdweb_secret_key: Optional[str] = None
    facilitator_url: str = DEFAULT_FACILITATOR_URL
    server_wallet_address: Optional[str] = None
    network: str = DEFAULT_NETWORK
    circle_api_key: Optional[str] = None
    circle_entity_secret: Optional[str] = None
    circle_recovery_dir: str = "."
    port: int = DEFAULT_PORT
    app_env: str = "production"
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def ai_credential(self) -> Credential:
        return classify_credential(self.gemini_api_key)

    @property
    def payment_credential(self) -> Credential:
        return classify_credential(self.thirdweb_secret_key)

    @property
    def wallet_credential(self) -> Credential:
        return classify_credential(self.circle_api_key)

    @property
    def server_wallet_configured(self) -> bool:
        if classify_credential(self.server_wallet_address) is Credential.ABSENT_OR_PLACEHOLDER:
            return False
        return self.server_wallet_address.strip() != "0x"


def parse_port(value: Optional[str]) -> int:
    """PORT as an int; unset or unusable values fall back to DEFAULT_PORT."""
    if value is None or not value.strip():
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        logger.warning("Invalid PORT %r, using %d", value, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 0 < port < 65536:
        logger.warning("PORT %d out of range, using %d", port, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


def parse_log_level(value: Optional[str]) -> str:
    """Upper-cased level name known to logging, else DEFAULT_LOG_LEVEL."""
    if value is None or not value.strip():
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    # getLevelName maps known names to their int value
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Unknown LOG_LEVEL %r, using %s", value, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Snapshot the environment (os.environ by default) into Settings."""
    env = os.environ if environ is None else environ

    return Settings(
        gemini_api_key=env.get("GEMINI_API_KEY"),
        gemini_model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
        thirdweb_secret_key=env.get("THIRDWEB_SECRET_KEY"),
        facilitator_url=(env.get("X402_FACILITATOR_URL") or DEFAULT_FACILITATOR_URL).rstrip("/"),
        server_wallet_address=env.get("SERVER_WALLET_ADDRESS"),
        network=env.get("NETWORK") or DEFAULT_NETWORK,
        circle_api_key=env.get("CIRCLE_API_KEY"),
        circle_entity_secret=env.get("CIRCLE_ENTITY_SECRET"),
        circle_recovery_dir=env.get("CIRCLE_RECOVERY_DIR") or ".",
        port=parse_port(env.get("PORT")),
        app_env=env.get("APP_ENV", "production"),
        log_level=parse_log_level(env.get("LOG_LEVEL")),
    )


def get_chain_id(network: str = DEFAULT_NETWORK) -> int:
    """Get chain ID for network."""
    return NETWORKS.get(network, NETWORKS[DEFAULT_NETWORK])["chain_id"]


def get_usdc_address(network: str = DEFAULT_NETWORK) -> str:
    """Get USDC contract address for network."""
    return NETWORKS.get(network, NETWORKS[DEFAULT_NETWORK])["usdc"]

