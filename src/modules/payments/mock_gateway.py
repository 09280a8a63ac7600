"""Deterministic in-process gateway for development and tests."""

from __future__ import annotations

import hashlib
from decimal import Decimal

import structlog

from modules.payments.dtos import CardDataDTO, TokenizedCardDTO
from modules.payments.gateway import GatewayVerdict, PaymentGateway

logger = structlog.get_logger(__name__)


class MockPaymentGateway(PaymentGateway):
    """Approves every charge below ``decline_threshold``, declines the rest."""

    def __init__(self, decline_threshold: Decimal) -> None:
        self._decline_threshold = Decimal(decline_threshold)

    def tokenize_card(self, card: CardDataDTO) -> TokenizedCardDTO:
        digest = hashlib.sha256(card.card_number.encode()).hexdigest()[:16]
        return TokenizedCardDTO(
            token=f"tok_test_{digest}",
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
        verdict = (
            GatewayVerdict.DECLINED
            if amount >= self._decline_threshold
            else GatewayVerdict.APPROVED
        )
        logger.info(
            "payment.mock_charge",
            reference=reference,
            amount=str(amount),
            verdict=str(verdict),
        )
        return verdict
