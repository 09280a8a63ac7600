"""Customer service layer (Use Cases).

- ``CustomerResolver``: find-or-create by email during order creation.
- ``CustomerService``: read queries for the customers API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog

from modules.core.exceptions import NotFoundError

if TYPE_CHECKING:
    from django.db import models

    from modules.customers.models import Customer
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    """Matching key for customer emails: trimmed and lower-cased."""
    return email.strip().lower()


class CustomerResolver:
    """Resolves the customer placing an order, keyed by email.

    An existing customer is returned unchanged even when the request
    carries a different name or address: profile data is never clobbered
    by an order.
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    def resolve(self, name: str, email: str, address: str) -> Customer:
        normalized = normalize_email(email)
        customer, created = self._repo.get_or_create_by_email(
            normalized,
            defaults={"name": name.strip(), "address": address.strip()},
        )
        logger.info(
            "customer.resolved",
            customer_id=str(customer.id),
            created=created,
        )
        return customer


class CustomerService:
    """Application service for Customer read use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """Return customers, optionally filtered."""
        return self._repo.list(filters)

    def get_customer(self, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            NotFoundError: if the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise NotFoundError("customer", id)
        logger.info("customer.retrieved", customer_id=str(id))
        return customer
