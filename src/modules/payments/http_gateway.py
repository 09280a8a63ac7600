"""HTTP client for the external card processor.

Every call goes through one short-lived ``httpx.Client`` with an explicit
``httpx.Timeout``.  A charge is three requests:

1. ``GET  {api}/merchants/{public_key}``: acceptance tokens.
2. ``POST {api}/tokens/cards`` (public key): card token.
3. ``POST {api}/transactions`` (private key): the charge itself.

Timeouts surface as ``PaymentGatewayTimeout`` (the outcome of the charge is
unknown); any other transport error, non-2xx status or malformed body
surfaces as ``PaymentGatewayError``.  Nothing is retried.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import httpx
import structlog

from modules.core.exceptions import PaymentGatewayError, PaymentGatewayTimeout
from modules.payments.dtos import CardDataDTO, TokenizedCardDTO
from modules.payments.gateway import GatewayVerdict, PaymentGateway

logger = structlog.get_logger(__name__)

CENTS_PER_UNIT = Decimal("100")
DEFAULT_INSTALLMENTS = 1


class HttpPaymentGateway(PaymentGateway):
    def __init__(
        self,
        api_url: str,
        public_key: str,
        private_key: str,
        currency: str = "COP",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            api_url: Base URL of the processor API (no trailing slash needed).
            public_key: Merchant public key (acceptance tokens, tokenization).
            private_key: Merchant private key (charges).
            currency: ISO currency code sent with every charge.
            timeout: Seconds allowed for connect/read/write of each request.
            transport: Optional transport override (``httpx.MockTransport``).
        """
        self.api_url = api_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self._public_key = public_key
        self._private_key = private_key
        self._transport = transport

    # ------------------------------------------------------------------
    # PaymentGateway
    # ------------------------------------------------------------------

    def tokenize_card(self, card: CardDataDTO) -> TokenizedCardDTO:
        with self._client() as client:
            token = self._tokenize(client, card)
        return TokenizedCardDTO(
            token=token,
            brand=card.brand,
            last_four=card.last_four,
            expiration_month=card.expiration_month,
            expiration_year=card.expiration_year,
        )

    def charge(
        self,
        reference: str,
        amount: Decimal,
        card: CardDataDTO,
        customer_email: str,
    ) -> GatewayVerdict:
        log = logger.bind(reference=reference, amount=str(amount))
        log.info("payment.charge_started")

        with self._client() as client:
            acceptance = self._request(
                client, "GET", f"/merchants/{self._public_key}"
            )
            try:
                presigned = acceptance["data"]
                acceptance_token = presigned["presigned_acceptance"]["acceptance_token"]
                personal_auth_token = presigned["presigned_personal_data_auth"][
                    "acceptance_token"
                ]
            except (KeyError, TypeError) as exc:
                raise PaymentGatewayError(
                    "Malformed acceptance token response."
                ) from exc

            token = self._tokenize(client, card)
            body = self._request(
                client,
                "POST",
                "/transactions",
                bearer=self._private_key,
                json={
                    "acceptance_token": acceptance_token,
                    "accept_personal_auth": personal_auth_token,
                    "amount_in_cents": to_cents(amount),
                    "currency": self.currency,
                    "customer_email": customer_email,
                    "reference": reference,
                    "payment_method": {
                        "type": "CARD",
                        "token": token,
                        "installments": DEFAULT_INSTALLMENTS,
                    },
                },
            )

        try:
            gateway_status = body["data"]["status"]
        except (KeyError, TypeError) as exc:
            raise PaymentGatewayError("Malformed transaction response.") from exc

        verdict = GatewayVerdict.from_gateway_status(gateway_status)
        log.info(
            "payment.charge_completed",
            gateway_status=gateway_status,
            verdict=str(verdict),
        )
        return verdict

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.api_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    def _tokenize(self, client: httpx.Client, card: CardDataDTO) -> str:
        body = self._request(
            client,
            "POST",
            "/tokens/cards",
            bearer=self._public_key,
            json={
                "number": card.card_number,
                "exp_month": f"{card.expiration_month:02d}",
                "exp_year": str(card.expiration_year),
                "cvc": card.cvv,
                "card_holder": card.cardholder_name,
            },
        )
        try:
            return str(body["data"]["id"])
        except (KeyError, TypeError) as exc:
            raise PaymentGatewayError("Malformed card token response.") from exc

    def _request(
        self,
        client: httpx.Client,
        method: str,
        path: str,
        bearer: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {bearer}"} if bearer else None
        try:
            response = client.request(method, path, json=json, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            logger.error("payment.gateway_timeout", method=method, path=path)
            raise PaymentGatewayTimeout(
                f"Payment gateway timed out after {self.timeout}s."
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "payment.gateway_http_error",
                method=method,
                path=path,
                status_code=exc.response.status_code,
            )
            raise PaymentGatewayError(
                f"Payment gateway returned HTTP {exc.response.status_code}."
            ) from exc
        except httpx.RequestError as exc:
            logger.error(
                "payment.gateway_request_error",
                method=method,
                path=path,
                error=type(exc).__name__,
            )
            raise PaymentGatewayError("Payment gateway is unreachable.") from exc
        except ValueError as exc:
            logger.error("payment.gateway_invalid_json", method=method, path=path)
            raise PaymentGatewayError("Payment gateway returned invalid JSON.") from exc


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * CENTS_PER_UNIT).quantize(Decimal("1"), ROUND_HALF_UP))
