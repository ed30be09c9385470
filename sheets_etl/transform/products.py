"""Product flatteners: one catalog record to one sheet row."""

import logging
from typing import Any, NamedTuple

from sheets_etl.models import Product
from sheets_etl.transform.columns import Column, render_row
from sheets_etl.transform.values import epoch_to_datetime, join_text, to_json_text, yes_no

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"
CALORIES_FIELD = "calories"


def build_custom_fields(product: Product) -> dict:
    """Reduce a product's custom field entries to a key -> value mapping.

    A key that appears more than once keeps its first position and its
    last value.
    """
    fields = {}
    for entry in product.custom_fields:
        fields[entry.key] = entry.value
    return fields


class ProductSource(NamedTuple):
    """Row source for the product column tables."""

    product: Product
    custom_fields: dict

    @classmethod
    def from_raw(cls, raw: Any) -> "ProductSource":
        product = Product.from_dict(raw)
        return cls(product=product, custom_fields=build_custom_fields(product))


def _tags(product: Product):
    if isinstance(product.tags, tuple):
        return join_text(product.tags)
    return product.tags


def _modifier_groups(product: Product) -> str:
    groups = product.modifier_groups
    return to_json_text(groups if groups is not None else [])


def _custom_field(key: str):
    def getter(src: ProductSource):
        value = src.custom_fields.get(key)
        # Cells hold scalars; structured custom values are kept as JSON text
        if isinstance(value, (dict, list)):
            return to_json_text(value)
        return value
    return getter


_LEADING_COLUMNS = [
    Column("ID", lambda s: s.product.id),
    Column("POS ID", lambda s: s.product.pos_id),
    Column("Brand ID", lambda s: s.product.brand_id),
    Column("Name", lambda s: s.product.name),
    Column("Description", lambda s: s.product.description),
    Column("Price", lambda s: s.product.price),
    Column("Quantity", lambda s: s.product.quantity),
    Column("In Stock", lambda s: yes_no(s.product.in_stock)),
    Column("Status", lambda s: s.product.status),
    Column("Not Found", lambda s: yes_no(s.product.not_found)),
    Column("Tags", lambda s: _tags(s.product)),
    Column("Category ID", lambda s: s.product.category.id if s.product.category else None),
    Column("Category", lambda s: s.product.category.name if s.product.category else None),
]

_TRAILING_COLUMNS = [
    Column("Custom Fields", lambda s: to_json_text(s.custom_fields)),
    Column("Modifier Groups", lambda s: _modifier_groups(s.product)),
    Column("Created", lambda s: epoch_to_datetime(s.product.created)),
    Column("Updated", lambda s: epoch_to_datetime(s.product.updated)),
]

PRODUCT_COLUMNS = _LEADING_COLUMNS + _TRAILING_COLUMNS

PRODUCT_DETAILED_COLUMNS = _LEADING_COLUMNS + [
    Column("Image URL", _custom_field(IMAGE_FIELD)),
    Column("Calories", _custom_field(CALORIES_FIELD)),
] + _TRAILING_COLUMNS


def flatten_product(raw: Any) -> list:
    """Flatten one raw product into a Products row (17 columns)."""
    return render_row(PRODUCT_COLUMNS, ProductSource.from_raw(raw))


def flatten_product_detailed(raw: Any) -> list:
    """Flatten one raw product into a Products Detailed row (19 columns).

    Same as flatten_product with the image and calories custom fields
    repeated in their own columns.
    """
    return render_row(PRODUCT_DETAILED_COLUMNS, ProductSource.from_raw(raw))


def flatten_products(records: list, detailed: bool = False) -> list[list]:
    """Flatten a batch of raw products in source order."""
    flatten = flatten_product_detailed if detailed else flatten_product
    rows = [flatten(record) for record in records]
    logger.debug(f"Flattened {len(rows)} products", extra={"detailed": detailed})
    return rows
