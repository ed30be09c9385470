"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture
def sample_product():
    """Catalog product with every field populated."""
    return {
        "id": "prod-1",
        "created": 1705315800,
        "updated": 1705402200,
        "pos_id": "POS-100",
        "brand_id": "brand-9",
        "name": "Cheeseburger",
        "description": "Beef patty with cheddar",
        "price": 9.5,
        "quantity": 40,
        "in_stock": True,
        "status": "active",
        "not_found": False,
        "tags": ["burger", "beef"],
        "category": {"id": "cat-1", "name": "Burgers"},
        "custom_fields": [
            {"key": "calories", "value": "750"},
            {"key": "image", "value": "https://cdn.example.com/burger.png"},
            {"key": "spicy", "value": "no"},
        ],
        "modifier_groups": [
            {"name": "Extras", "options": [{"name": "Bacon", "price": 1.5}]},
        ],
    }


@pytest.fixture
def bare_product():
    """Product with only an id."""
    return {"id": "prod-2"}


@pytest.fixture
def sample_order():
    """Order with two checks: the first unpaid, the second paid by card."""
    return {
        "guid": "order-1",
        "displayNumber": "42",
        "source": "In Store",
        "businessDate": 20250115,
        "openedDate": "2025-01-15T18:00:00.000+0000",
        "paidDate": "2025-01-15T18:45:10.500+0000",
        "closedDate": "2025-01-15T18:46:00.000+0000",
        "duration": 2760,
        "numberOfGuests": 3,
        "voided": False,
        "approvalStatus": "APPROVED",
        "server": {"guid": "server-7", "entityType": "RestaurantUser"},
        "createdDevice": {"id": "device-3"},
        "createdInTestMode": False,
        "checks": [
            {
                "guid": "check-a",
                "displayNumber": "1",
                "totalAmount": 21.6,
                "taxAmount": 1.6,
                "paymentStatus": "OPEN",
                "payments": [],
                "selections": [
                    {
                        "guid": "sel-1",
                        "displayName": "Burger",
                        "quantity": 2,
                        "price": 10.0,
                        "salesCategory": {"guid": "cat-food"},
                        "itemGroup": {"guid": "grp-mains"},
                        "fulfillmentStatus": "SENT",
                        "modifiers": [
                            {"displayName": "No Onion"},
                            {"displayName": "Extra Cheese"},
                        ],
                    },
                ],
            },
            {
                "guid": "check-b",
                "displayNumber": "2",
                "totalAmount": 10.8,
                "taxAmount": 0.8,
                "paymentStatus": "PAID",
                "payments": [
                    {"type": "CREDIT", "amount": 10},
                    {"type": "CASH", "amount": 0.8},
                ],
                "selections": [
                    {
                        "guid": "sel-2",
                        "displayName": "Fries",
                        "quantity": 1,
                        "price": 4.0,
                        "modifiers": [],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def empty_check_order():
    """Order whose only check has no selections."""
    return {
        "guid": "order-2",
        "displayNumber": "43",
        "businessDate": 20250115,
        "checks": [
            {
                "guid": "check-c",
                "displayNumber": "1",
                "totalAmount": 0,
                "paymentStatus": "PAID",
                "payments": [{"type": "CASH", "amount": 5}],
                "selections": [],
            },
        ],
    }


class FakeProductsClient:
    """Stands in for ProductsClient."""

    def __init__(self, products=None, error=None):
        self.products = products or []
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.products


class FakeOrdersClient:
    """Stands in for OrdersClient, recording the business dates asked for."""

    def __init__(self, orders=None, error=None):
        self.orders = orders or []
        self.error = error
        self.business_dates = []

    def fetch(self, business_date):
        self.business_dates.append(business_date)
        if self.error:
            raise self.error
        return self.orders


@pytest.fixture
def fake_products_client():
    return FakeProductsClient


@pytest.fixture
def fake_orders_client():
    return FakeOrdersClient
