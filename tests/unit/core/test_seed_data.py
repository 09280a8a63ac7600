"""Unit tests for the ``seed_data`` management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.products.models import Product

pytestmark = pytest.mark.unit


def test_seeds_user_and_catalog():
    out = StringIO()

    call_command("seed_data", stdout=out)

    assert Product.objects.count() == 5
    assert get_user_model().objects.filter(username="storefront").exists()
    assert "users=1, products=5" in out.getvalue()


def test_is_idempotent():
    call_command("seed_data", stdout=StringIO())
    out = StringIO()

    call_command("seed_data", stdout=out)

    assert Product.objects.count() == 5
    assert "users=0, products=0" in out.getvalue()
