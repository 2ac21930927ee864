"""
Circle developer-controlled wallets.

Wraps the Circle SDK behind the WalletProvisioner and EntitySecretRegistrar
interfaces, plus local entity secret generation.
"""

import secrets
from typing import Any, List, Sequence

from circle.web3 import developer_controlled_wallets, utils

from config import Credential, classify_credential
from providers import WalletInfo
from errors import ConfigurationMissing

ENTITY_SECRET_BYTES = 32


def generate_entity_secret() -> str:
    """Generate a new entity secret (64 hex characters)."""
    return secrets.token_hex(ENTITY_SECRET_BYTES)


def _unwrap(model: Any) -> Any:
    # oneOf response models keep the concrete object in actual_instance
    return getattr(model, "actual_instance", None) or model


def _blockchain_name(blockchain: Any) -> str:
    return getattr(blockchain, "value", blockchain)


def vendor_error_details(error: Exception) -> Any:
    """Best-effort vendor payload for an SDK exception."""
    body = getattr(error, "body", None)
    if body:
        return body
    return str(error)


class CircleWalletProvisioner:
    def __init__(self, api_key: str, entity_secret: str):
        if classify_credential(api_key) is Credential.ABSENT_OR_PLACEHOLDER:
            raise ConfigurationMissing("CIRCLE_API_KEY is not set")
        if classify_credential(entity_secret) is Credential.ABSENT_OR_PLACEHOLDER:
            raise ConfigurationMissing("CIRCLE_ENTITY_SECRET is not set")

        self._client = utils.init_developer_controlled_wallets_client(
            api_key=api_key,
            entity_secret=entity_secret,
        )

    def create_wallet_set(self, name: str) -> str:
        api = developer_controlled_wallets.WalletSetsApi(self._client)
        request = developer_controlled_wallets.CreateWalletSetRequest.from_dict({"name": name})
        response = api.create_wallet_set(request)
        return _unwrap(response.data.wallet_set).id

    def create_wallets(
        self,
        wallet_set_id: str,
        blockchains: Sequence[str],
        count: int = 1,
        account_type: str = "SCA",
    ) -> List[WalletInfo]:
        api = developer_controlled_wallets.WalletsApi(self._client)
        request = developer_controlled_wallets.CreateWalletRequest.from_dict({
            "accountType": account_type,
            "blockchains": list(blockchains),
            "count": count,
            "walletSetId": wallet_set_id,
        })
        response = api.create_wallet(request)
        return [
            WalletInfo(address=wallet.address, blockchain=_blockchain_name(wallet.blockchain))
            for wallet in map(_unwrap, response.data.wallets)
        ]


class CircleEntitySecretRegistrar:
    """Registers the entity secret ciphertext and saves the recovery file."""

    def __init__(self, recovery_dir: str = "."):
        self.recovery_dir = recovery_dir

    def register(self, api_key: str, entity_secret: str) -> Any:
        return utils.register_entity_secret_ciphertext(
            api_key=api_key,
            entity_secret=entity_secret,
            recoveryFileDownloadPath=self.recovery_dir,
        )
