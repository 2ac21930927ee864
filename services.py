"""
Startup wiring for the three external integrations.

initialize_services() runs once before the server starts. It classifies the
credentials, tries to build each vendor client and records the outcome in an
immutable ServiceStatus. It never raises: a broken integration only degrades
its feature.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, TypeVar

from config import Credential, Settings
from facilitator import ThirdwebFacilitator
from gemini import GeminiAnswerProvider
from providers import AnswerProvider, PaymentSettler, WalletProvisioner
from wallets import CircleWalletProvisioner

logger = logging.getLogger(__name__)

AI_CONNECTED = "connected"
AI_DISCONNECTED = "disconnected"

READY = "ready"
PENDING_CREDENTIALS = "pending_credentials"
CONFIG_ERROR = "config_error"

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceStatus:
    ai: str = AI_DISCONNECTED
    payment: str = PENDING_CREDENTIALS
    wallet: str = PENDING_CREDENTIALS

    @property
    def ai_connected(self) -> bool:
        return self.ai == AI_CONNECTED

    @property
    def payment_ready(self) -> bool:
        return self.payment == READY

    @property
    def wallet_ready(self) -> bool:
        return self.wallet == READY


@dataclass(frozen=True)
class Services:
    settings: Settings
    status: ServiceStatus
    answer_provider: Optional[AnswerProvider] = None
    payment_settler: Optional[PaymentSettler] = None
    wallet_provisioner: Optional[WalletProvisioner] = None


def default_answer_factory(settings: Settings) -> AnswerProvider:
    return GeminiAnswerProvider(settings.gemini_api_key, model=settings.gemini_model)


def default_settler_factory(settings: Settings) -> PaymentSettler:
    return ThirdwebFacilitator(
        settings.thirdweb_secret_key,
        server_wallet_address=settings.server_wallet_address,
        facilitator_url=settings.facilitator_url,
    )


def default_wallet_factory(settings: Settings) -> WalletProvisioner:
    return CircleWalletProvisioner(settings.circle_api_key, settings.circle_entity_secret)


def _build(
    label: str,
    credential: Credential,
    factory: Callable[[Settings], T],
    settings: Settings,
    secret_name: str,
) -> Tuple[Optional[T], Optional[Exception]]:
    """Returns (client, None), (None, error) or (None, None) when unconfigured."""
    if credential is Credential.ABSENT_OR_PLACEHOLDER:
        logger.info("%s: awaiting %s", label, secret_name)
        return None, None
    try:
        client = factory(settings)
    except Exception as e:
        logger.error("%s: config error - %s", label, e)
        return None, e
    logger.info("%s: initialized", label)
    return client, None


def initialize_services(
    settings: Settings,
    answer_factory: Callable[[Settings], AnswerProvider] = default_answer_factory,
    settler_factory: Callable[[Settings], PaymentSettler] = default_settler_factory,
    wallet_factory: Callable[[Settings], WalletProvisioner] = default_wallet_factory,
) -> Services:
    answer_provider, _ = _build(
        f"Gemini AI ({settings.gemini_model})",
        settings.ai_credential,
        answer_factory,
        settings,
        "GEMINI_API_KEY",
    )
    settler, settler_error = _build(
        "x402 Payments",
        settings.payment_credential,
        settler_factory,
        settings,
        "THIRDWEB_SECRET_KEY",
    )
    provisioner, wallet_error = _build(
        "Circle Wallets",
        settings.wallet_credential,
        wallet_factory,
        settings,
        "CIRCLE_API_KEY",
    )

    status = ServiceStatus(
        ai=AI_CONNECTED if answer_provider is not None else AI_DISCONNECTED,
        payment=_integration_status(settler, settler_error),
        wallet=_integration_status(provisioner, wallet_error),
    )
    return Services(
        settings=settings,
        status=status,
        answer_provider=answer_provider,
        payment_settler=settler,
        wallet_provisioner=provisioner,
    )


def _integration_status(client, error: Optional[Exception]) -> str:
    if client is not None:
        return READY
    if error is not None:
        return CONFIG_ERROR
    return PENDING_CREDENTIALS


def log_startup_summary(services: Services) -> None:
    """Console banner printed once the server is about to listen."""
    status = services.status
    print("=" * 50)
    print("  AI Vending Machine")
    print("=" * 50)
    print(f"\n  Port: {services.settings.port}")
    print("\n  Available Endpoints:")
    print("    GET  /              - Project homepage")
    print("    GET  /health        - Health check (JSON)")
    print("    POST /api/ask-free  - Free AI endpoint")
    print("    POST /api/ask-paid  - Paid endpoint (x402)")
    print("\n  Current Status:")
    print(f"    Gemini AI: {'Connected' if status.ai_connected else 'Disconnected'}")
    print(f"    Payments:  {'Ready' if status.payment_ready else 'Awaiting credentials'}")
    print(f"    Wallets:   {'Ready' if status.wallet_ready else 'Awaiting credentials'}")
    print("=" * 50 + "\n")
