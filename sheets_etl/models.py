"""Typed snapshots of the upstream product and order records.

Parsing never raises. A field that is absent, null, or of the wrong shape
becomes None (scalars and references) or an empty tuple (lists); output
defaults are applied later by the column tables.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

Scalar = Union[str, int, float, bool]
Number = Union[int, float]


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_scalar(value: Any) -> Optional[Scalar]:
    """Keep plain JSON scalars; nested objects, arrays and NaN/infinity become None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    return None


def _as_number(value: Any) -> Optional[Number]:
    """Finite numbers pass through, numeric strings are parsed, anything else is None.

    NaN and infinity, as floats or as text, count as absent.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def _as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


# ============================================
# Products
# ============================================

@dataclass(frozen=True)
class Category:
    """Category reference attached to a product."""

    id: Optional[Scalar] = None
    name: Optional[Scalar] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Category"]:
        if not isinstance(data, dict):
            return None
        return cls(id=_as_scalar(data.get("id")), name=_as_scalar(data.get("name")))


@dataclass(frozen=True)
class CustomField:
    """One open-ended key/value attribute of a product."""

    key: str
    value: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CustomField"]:
        data = _as_dict(data)
        key = data.get("key")
        if not isinstance(key, str) or not key:
            return None
        return cls(key=key, value=data.get("value"))


@dataclass(frozen=True)
class Product:
    """A product from the POS catalog."""

    id: Optional[Scalar] = None
    created: Optional[Number] = None
    updated: Optional[Number] = None
    pos_id: Optional[Scalar] = None
    brand_id: Optional[Scalar] = None
    name: Optional[Scalar] = None
    description: Optional[Scalar] = None
    price: Optional[Scalar] = None
    quantity: Optional[Scalar] = None
    in_stock: Optional[bool] = None
    status: Optional[Scalar] = None
    not_found: Optional[bool] = None
    tags: Union[str, tuple, None] = None
    category: Optional[Category] = None
    custom_fields: tuple = ()
    modifier_groups: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "Product":
        data = _as_dict(data)

        tags = data.get("tags")
        if isinstance(tags, list):
            tags = tuple(_as_scalar(t) for t in tags if _as_scalar(t) is not None)
        elif not isinstance(tags, str):
            tags = None

        custom_fields = tuple(
            f for f in (CustomField.from_dict(e) for e in _as_list(data.get("custom_fields")))
            if f is not None
        )

        return cls(
            id=_as_scalar(data.get("id")),
            created=_as_number(data.get("created")),
            updated=_as_number(data.get("updated")),
            pos_id=_as_scalar(data.get("pos_id")),
            brand_id=_as_scalar(data.get("brand_id")),
            name=_as_scalar(data.get("name")),
            description=_as_scalar(data.get("description")),
            price=_as_scalar(data.get("price")),
            quantity=_as_scalar(data.get("quantity")),
            in_stock=_as_bool(data.get("in_stock")),
            status=_as_scalar(data.get("status")),
            not_found=_as_bool(data.get("not_found")),
            tags=tags,
            category=Category.from_dict(data.get("category")),
            custom_fields=custom_fields,
            modifier_groups=data.get("modifier_groups"),
        )


# ============================================
# Orders
# ============================================

@dataclass(frozen=True)
class Payment:
    type: Optional[Scalar] = None
    amount: Optional[Number] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Payment":
        data = _as_dict(data)
        return cls(type=_as_scalar(data.get("type")), amount=_as_number(data.get("amount")))


@dataclass(frozen=True)
class Selection:
    """A single ordered line item within a check."""

    guid: Optional[Scalar] = None
    display_name: Optional[Scalar] = None
    quantity: Optional[Number] = None
    price: Optional[Number] = None
    sales_category: Optional[Scalar] = None
    item_group: Optional[Scalar] = None
    fulfillment_status: Optional[Scalar] = None
    modifiers: tuple = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Selection":
        data = _as_dict(data)
        modifier_names = tuple(
            _as_scalar(_as_dict(m).get("displayName")) for m in _as_list(data.get("modifiers"))
        )
        return cls(
            guid=_as_scalar(data.get("guid")),
            display_name=_as_scalar(data.get("displayName")),
            quantity=_as_number(data.get("quantity")),
            price=_as_number(data.get("price")),
            sales_category=_as_scalar(_as_dict(data.get("salesCategory")).get("guid")),
            item_group=_as_scalar(_as_dict(data.get("itemGroup")).get("guid")),
            fulfillment_status=_as_scalar(data.get("fulfillmentStatus")),
            modifiers=modifier_names,
        )


@dataclass(frozen=True)
class Check:
    """A sub-bill within an order, with its own payments and line items."""

    guid: Optional[Scalar] = None
    display_number: Optional[Scalar] = None
    total_amount: Optional[Number] = None
    tax_amount: Optional[Number] = None
    payment_status: Optional[Scalar] = None
    payments: tuple = ()
    selections: tuple = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Check":
        data = _as_dict(data)
        return cls(
            guid=_as_scalar(data.get("guid")),
            display_number=_as_scalar(data.get("displayNumber")),
            total_amount=_as_number(data.get("totalAmount")),
            tax_amount=_as_number(data.get("taxAmount")),
            payment_status=_as_scalar(data.get("paymentStatus")),
            payments=tuple(Payment.from_dict(p) for p in _as_list(data.get("payments"))),
            selections=tuple(Selection.from_dict(s) for s in _as_list(data.get("selections"))),
        )

    @property
    def first_payment(self) -> Optional[Payment]:
        return self.payments[0] if self.payments else None


@dataclass(frozen=True)
class Order:
    """An order from the order management API."""

    guid: Optional[Scalar] = None
    display_number: Optional[Scalar] = None
    source: Optional[Scalar] = None
    business_date: Optional[Scalar] = None
    opened_date: Optional[Scalar] = None
    paid_date: Optional[Scalar] = None
    closed_date: Optional[Scalar] = None
    duration: Optional[Scalar] = None
    number_of_guests: Optional[Scalar] = None
    voided: Optional[bool] = None
    approval_status: Optional[Scalar] = None
    server: Optional[Scalar] = None
    device: Optional[Scalar] = None
    test_mode: Optional[bool] = None
    checks: tuple = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> "Order":
        data = _as_dict(data)
        return cls(
            guid=_as_scalar(data.get("guid")),
            display_number=_as_scalar(data.get("displayNumber")),
            source=_as_scalar(data.get("source")),
            business_date=_as_scalar(data.get("businessDate")),
            opened_date=_as_scalar(data.get("openedDate")),
            paid_date=_as_scalar(data.get("paidDate")),
            closed_date=_as_scalar(data.get("closedDate")),
            duration=_as_scalar(data.get("duration")),
            number_of_guests=_as_scalar(data.get("numberOfGuests")),
            voided=_as_bool(data.get("voided")),
            approval_status=_as_scalar(data.get("approvalStatus")),
            server=_as_scalar(_as_dict(data.get("server")).get("guid")),
            device=_as_scalar(_as_dict(data.get("createdDevice")).get("id")),
            test_mode=_as_bool(data.get("createdInTestMode")),
            checks=tuple(Check.from_dict(c) for c in _as_list(data.get("checks"))),
        )
