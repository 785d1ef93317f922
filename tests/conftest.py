"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Set test environment variables before scancart.config is imported
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_secret")

from fastapi.testclient import TestClient  # noqa: E402

from scancart.services.catalog import Catalog, ProductDescriptor  # noqa: E402
from scancart.services.notifier import ChangeNotifier  # noqa: E402
from scancart.store.cart import CartStore  # noqa: E402


@pytest.fixture
def catalog():
    """Two-product catalog"""
    return Catalog(
        {
            "T1": ProductDescriptor(name="A", price=Decimal("10.0")),
            "T2": ProductDescriptor(name="B", price=Decimal("2.50")),
        }
    )


@pytest.fixture
def store(catalog):
    return CartStore(catalog)


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def client(monkeypatch, catalog, notifier):
    """Test client wired to a fresh cart and notifier"""
    from scancart.web import main as web_main

    monkeypatch.setattr(web_main, "notifier", notifier)
    monkeypatch.setattr(web_main, "store", CartStore(catalog, on_change=notifier.notify))
    # one portal for every request and websocket so background broadcasts share a loop
    with TestClient(web_main.app) as c:
        yield c
