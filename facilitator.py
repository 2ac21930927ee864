"""
x402 facilitator client - settles payment proofs through thirdweb.

The facilitator does all verification and on-chain settlement. This module
only builds the payment requirements for a query, forwards the buyer's
x-payment proof and reports the outcome as a SettlementResult.
"""

import logging
from typing import Any, Dict, Optional, Union

import httpx
from web3 import Web3
from x402.http import AuthHeaders, FacilitatorConfig, HTTPFacilitatorClient
from x402.http.utils import decode_payment_signature_header
from x402.schemas import (
    PaymentPayloadV1,
    PaymentRequired,
    PaymentRequiredV1,
    PaymentRequirements,
    PaymentRequirementsV1,
    ResourceInfo,
    convert_to_token_amount,
    parse_money,
)

from config import (
    DEFAULT_FACILITATOR_URL,
    USDC_DECIMALS,
    USDC_NAME,
    USDC_VERSION,
    Credential,
    classify_credential,
    get_chain_id,
    get_usdc_address,
)
from errors import ConfigurationMissing, UpstreamCallFailure
from providers import SettlementResult

logger = logging.getLogger(__name__)

MAX_TIMEOUT_SECONDS = 300
RESOURCE_DESCRIPTION = "AI Vending Machine Query"

Requirements = Union[PaymentRequirements, PaymentRequirementsV1]


def price_to_atomic(price: str) -> str:
    """"$0.10" -> "100000" (USDC has 6 decimals)."""
    return convert_to_token_amount(parse_money(price)["amount"], USDC_DECIMALS)


def caip2_network(network: str) -> str:
    """x402 v2 network id, e.g. "eip155:5042002" for arc-testnet."""
    return f"eip155:{get_chain_id(network)}"


def build_requirements(
    pay_to: Optional[str],
    network: str,
    price: str,
    resource_url: str,
    version: int = 1,
) -> Requirements:
    """x402 "exact" scheme requirements for one paid query."""
    extra = {"name": USDC_NAME, "version": USDC_VERSION}
    if version == 1:
        return PaymentRequirementsV1(
            scheme="exact",
            network=network,
            max_amount_required=price_to_atomic(price),
            resource=resource_url,
            description=RESOURCE_DESCRIPTION,
            mime_type="application/json",
            pay_to=pay_to or "0x",
            max_timeout_seconds=MAX_TIMEOUT_SECONDS,
            asset=get_usdc_address(network),
            extra=extra,
        )
    return PaymentRequirements(
        scheme="exact",
        network=caip2_network(network),
        asset=get_usdc_address(network),
        amount=price_to_atomic(price),
        pay_to=pay_to or "0x",
        max_timeout_seconds=MAX_TIMEOUT_SECONDS,
        extra=extra,
    )


def payment_required(
    requirements: Requirements,
    error: str,
    message: Optional[str] = None,
    resource_url: Optional[str] = None,
) -> SettlementResult:
    """402 outcome carrying the requirements the buyer has to satisfy."""
    if isinstance(requirements, PaymentRequirementsV1):
        required = PaymentRequiredV1(error=error, accepts=[requirements])
    else:
        resource = None
        if resource_url:
            resource = ResourceInfo(
                url=resource_url,
                description=RESOURCE_DESCRIPTION,
                mime_type="application/json",
            )
        required = PaymentRequired(error=error, resource=resource, accepts=[requirements])
    body: Dict[str, Any] = required.model_dump(mode="json", by_alias=True, exclude_none=True)
    if message:
        body["errorMessage"] = message
    return SettlementResult(status=402, response_body=body)


class SecretKeyAuth:
    """thirdweb authenticates facilitator calls with x-secret-key."""

    def __init__(self, secret_key: str):
        self._headers = {"x-secret-key": secret_key}

    def get_auth_headers(self) -> AuthHeaders:
        return AuthHeaders(
            verify=dict(self._headers),
            settle=dict(self._headers),
            supported=dict(self._headers),
        )


class ThirdwebFacilitator:
    """PaymentSettler backed by the thirdweb x402 facilitator API."""

    def __init__(
        self,
        secret_key: str,
        server_wallet_address: Optional[str] = None,
        facilitator_url: str = DEFAULT_FACILITATOR_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if classify_credential(secret_key) is Credential.ABSENT_OR_PLACEHOLDER:
            raise ConfigurationMissing("THIRDWEB_SECRET_KEY is not set")

        self.server_wallet_address = None
        if server_wallet_address and server_wallet_address != "0x":
            if not Web3.is_address(server_wallet_address):
                raise ValueError(f"Invalid SERVER_WALLET_ADDRESS: {server_wallet_address}")
            self.server_wallet_address = Web3.to_checksum_address(server_wallet_address)

        self._client = HTTPFacilitatorClient(
            FacilitatorConfig(
                url=facilitator_url,
                timeout=float(MAX_TIMEOUT_SECONDS),
                http_client=http_client,
                auth_provider=SecretKeyAuth(secret_key),
            )
        )

    @property
    def facilitator_url(self) -> str:
        return self._client.url

    async def settle(
        self,
        payment_data: str,
        pay_to: Optional[str],
        network: str,
        price: str,
        resource_url: str,
    ) -> SettlementResult:
        """
        Settle a payment proof for one query.

        Returns status 200 with the transaction id when the facilitator
        settles, 402 with the payment requirements when it refuses.
        Transport failures raise UpstreamCallFailure.
        """
        if pay_to and Web3.is_address(pay_to):
            pay_to = Web3.to_checksum_address(pay_to)
        pay_to = pay_to or self.server_wallet_address

        try:
            payload = decode_payment_signature_header(payment_data)
        except (ValueError, AttributeError) as e:
            logger.warning("Invalid payment header: %s", e)
            requirements = build_requirements(pay_to, network, price, resource_url)
            return payment_required(requirements, "Invalid payment header", str(e))

        version = 1 if isinstance(payload, PaymentPayloadV1) else 2
        requirements = build_requirements(pay_to, network, price, resource_url, version=version)

        logger.info("Calling facilitator /settle: %s/settle", self.facilitator_url)
        try:
            response = await self._client.settle(payload, requirements)
        except httpx.HTTPError as e:
            raise UpstreamCallFailure(f"Facilitator error: {e}") from e
        except ValueError as e:
            # non-200 status or a body that is not a SettleResponse
            logger.warning("Facilitator rejected settlement: %s", e)
            return payment_required(requirements, "Settlement failed", str(e), resource_url)

        if not response.success:
            reason = response.error_reason or "Settlement failed"
            logger.warning("Settlement refused: %s", reason)
            return payment_required(requirements, reason, response.error_message, resource_url)

        return SettlementResult(
            status=200,
            transaction_id=response.transaction,
            response_body=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
