"""Customer repository interface.

Extends ``IRepository[Customer]`` with the find-or-create look-up used by
customer resolution during order creation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """List customers with optional filters."""

    @abstractmethod
    def get_or_create_by_email(
        self, email: str, defaults: Dict[str, Any]
    ) -> Tuple[Customer, bool]:
        """Atomically return the customer for ``email``, creating it if absent.

        ``defaults`` are used only when a new row is inserted.  Returns
        ``(customer, created)``.
        """
