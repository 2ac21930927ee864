from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from config import Settings
from providers import SettlementResult, WalletInfo
from server import create_app
from services import AI_CONNECTED, AI_DISCONNECTED, PENDING_CREDENTIALS, READY, Services, ServiceStatus

SERVER_WALLET = "0x" + "1" * 40


class FakeAnswerProvider:
    model = "fake-model"

    def __init__(self, answer: str = "Agentic commerce is...", error: Optional[Exception] = None):
        self._answer = answer
        self._error = error
        self.questions: List[str] = []

    async def answer(self, question: str) -> str:
        self.questions.append(question)
        if self._error is not None:
            raise self._error
        return self._answer


class FakeSettler:
    def __init__(self, result: Optional[SettlementResult] = None, error: Optional[Exception] = None):
        self.result = result or SettlementResult(status=200, transaction_id="0x" + "ab" * 32)
        self.error = error
        self.calls = []

    async def settle(self, payment_data, pay_to, network, price, resource_url):
        self.calls.append(
            {
                "payment_data": payment_data,
                "pay_to": pay_to,
                "network": network,
                "price": price,
                "resource_url": resource_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.result


class FakeProvisioner:
    def __init__(self, address: str = SERVER_WALLET, wallet_set_error: Optional[Exception] = None):
        self.address = address
        self.wallet_set_error = wallet_set_error
        self.wallet_sets = []
        self.wallet_requests = []

    def create_wallet_set(self, name):
        if self.wallet_set_error is not None:
            raise self.wallet_set_error
        self.wallet_sets.append(name)
        return "ws-1"

    def create_wallets(self, wallet_set_id, blockchains, count=1, account_type="SCA"):
        self.wallet_requests.append((wallet_set_id, list(blockchains), count, account_type))
        return [WalletInfo(address=self.address, blockchain=blockchains[0])]


def make_services(
    answer_provider=None,
    payment_settler=None,
    settings: Optional[Settings] = None,
) -> Services:
    if settings is None:
        settings = Settings(
            gemini_api_key="gemini-key" if answer_provider else None,
            thirdweb_secret_key="tw-secret" if payment_settler else None,
            server_wallet_address=SERVER_WALLET,
        )
    status = ServiceStatus(
        ai=AI_CONNECTED if answer_provider else AI_DISCONNECTED,
        payment=READY if payment_settler else PENDING_CREDENTIALS,
    )
    return Services(
        settings=settings,
        status=status,
        answer_provider=answer_provider,
        payment_settler=payment_settler,
    )


def client_for(services: Services) -> TestClient:
    return TestClient(create_app(services))


@pytest.fixture
def answer_provider() -> FakeAnswerProvider:
    return FakeAnswerProvider()


@pytest.fixture
def settler() -> FakeSettler:
    return FakeSettler()
