"""
Capability interfaces for the external collaborators.

The server only talks to these protocols; the vendor adapters (gemini,
facilitator, wallets) implement them and tests substitute fakes.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence


@dataclass(frozen=True)
class SettlementResult:
    """
    Outcome of a settlement attempt.

    status is an HTTP status code; 200 means the payment settled. The
    response_body is opaque JSON relayed as-is on failure.
    """
    status: int
    transaction_id: Optional[str] = None
    response_body: Any = None

    @property
    def settled(self) -> bool:
        return self.status == 200


@dataclass(frozen=True)
class WalletInfo:
    address: str
    blockchain: str


class AnswerProvider(Protocol):
    model: str

    async def answer(self, question: str) -> str:
        ...


class PaymentSettler(Protocol):
    async def settle(
        self,
        payment_data: str,
        pay_to: Optional[str],
        network: str,
        price: str,
        resource_url: str,
    ) -> SettlementResult:
        ...


class WalletProvisioner(Protocol):
    def create_wallet_set(self, name: str) -> str:
        ...

    def create_wallets(
        self,
        wallet_set_id: str,
        blockchains: Sequence[str],
        count: int = 1,
        account_type: str = "SCA",
    ) -> List[WalletInfo]:
        ...


class EntitySecretRegistrar(Protocol):
    def register(self, api_key: str, entity_secret: str) -> Any:
        ...
