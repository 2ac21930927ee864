from enum import Enum
from types import SimpleNamespace

import pytest

import wallets
from errors import ConfigurationMissing
from providers import WalletInfo
from wallets import CircleEntitySecretRegistrar, CircleWalletProvisioner

from conftest import SERVER_WALLET

SECRET = "ab" * 32


class Blockchain(Enum):
    ARC_TESTNET = "ARC-TESTNET"


class OneOf:
    """SDK oneOf wrapper: the concrete model lives in actual_instance."""

    def __init__(self, instance):
        self.actual_instance = instance


class RecordedRequest:
    """Stands in for the SDK request models; keeps the payload it was built from."""

    @classmethod
    def from_dict(cls, payload):
        request = cls()
        request.payload = payload
        return request


@pytest.fixture
def circle(monkeypatch):
    calls = {}

    def init_client(api_key, entity_secret):
        calls["client"] = {"api_key": api_key, "entity_secret": entity_secret}
        return "circle-client"

    class WalletSetsApi:
        def __init__(self, client):
            calls["wallet_sets_client"] = client

        def create_wallet_set(self, request):
            calls["wallet_set"] = request.payload
            return SimpleNamespace(data=SimpleNamespace(wallet_set=OneOf(SimpleNamespace(id="ws-123"))))

    class WalletsApi:
        def __init__(self, client):
            calls["wallets_client"] = client

        def create_wallet(self, request):
            calls["wallets"] = request.payload
            wallet = SimpleNamespace(address=SERVER_WALLET, blockchain=Blockchain.ARC_TESTNET)
            return SimpleNamespace(data=SimpleNamespace(wallets=[OneOf(wallet)]))

    def register(api_key, entity_secret, recoveryFileDownloadPath):
        calls["register"] = {
            "api_key": api_key,
            "entity_secret": entity_secret,
            "recoveryFileDownloadPath": recoveryFileDownloadPath,
        }
        return {"recoveryFile": "saved"}

    monkeypatch.setattr(wallets.utils, "init_developer_controlled_wallets_client", init_client)
    monkeypatch.setattr(wallets.utils, "register_entity_secret_ciphertext", register)
    monkeypatch.setattr(wallets.developer_controlled_wallets, "WalletSetsApi", WalletSetsApi)
    monkeypatch.setattr(wallets.developer_controlled_wallets, "WalletsApi", WalletsApi)
    monkeypatch.setattr(wallets.developer_controlled_wallets, "CreateWalletSetRequest", RecordedRequest)
    monkeypatch.setattr(wallets.developer_controlled_wallets, "CreateWalletRequest", RecordedRequest)
    return calls


def test_provisioner_initializes_sdk_client(circle) -> None:
    CircleWalletProvisioner("circle-key", SECRET)

    assert circle["client"] == {"api_key": "circle-key", "entity_secret": SECRET}


def test_create_wallet_set_unwraps_id(circle) -> None:
    provisioner = CircleWalletProvisioner("circle-key", SECRET)

    assert provisioner.create_wallet_set("Hackathon Server Wallets") == "ws-123"
    assert circle["wallet_set"] == {"name": "Hackathon Server Wallets"}
    assert circle["wallet_sets_client"] == "circle-client"


def test_create_wallets_sends_sca_request(circle) -> None:
    provisioner = CircleWalletProvisioner("circle-key", SECRET)

    created = provisioner.create_wallets("ws-123", ("ARC-TESTNET",))

    assert circle["wallets"] == {
        "accountType": "SCA",
        "blockchains": ["ARC-TESTNET"],
        "count": 1,
        "walletSetId": "ws-123",
    }
    assert circle["wallets_client"] == "circle-client"
    assert created == [WalletInfo(address=SERVER_WALLET, blockchain="ARC-TESTNET")]


@pytest.mark.parametrize(
    "api_key, entity_secret",
    [
        ("", SECRET),
        ("your_circle_api_key_here", SECRET),
        ("circle-key", None),
        ("circle-key", "your_entity_secret_here"),
    ],
)
def test_provisioner_requires_credentials(circle, api_key, entity_secret) -> None:
    with pytest.raises(ConfigurationMissing):
        CircleWalletProvisioner(api_key, entity_secret)

    assert "client" not in circle


def test_registrar_passes_recovery_dir(circle) -> None:
    ack = CircleEntitySecretRegistrar(recovery_dir="/tmp/recovery").register("circle-key", SECRET)

    assert ack == {"recoveryFile": "saved"}
    assert circle["register"] == {
        "api_key": "circle-key",
        "entity_secret": SECRET,
        "recoveryFileDownloadPath": "/tmp/recovery",
    }


def test_registrar_defaults_to_current_directory(circle) -> None:
    CircleEntitySecretRegistrar().register("circle-key", SECRET)

    assert circle["register"]["recoveryFileDownloadPath"] == "."
