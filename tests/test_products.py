"""Tests for the product flatteners."""

import json
from datetime import datetime

from sheets_etl.models import Product
from sheets_etl.transform import (
    PRODUCT_COLUMNS,
    PRODUCT_DETAILED_COLUMNS,
    build_custom_fields,
    flatten_product,
    flatten_product_detailed,
    flatten_products,
    headers,
)


def as_summary(raw):
    return dict(zip(headers(PRODUCT_COLUMNS), flatten_product(raw)))


def as_detailed(raw):
    return dict(zip(headers(PRODUCT_DETAILED_COLUMNS), flatten_product_detailed(raw)))


class TestProductSchemas:
    """Tests for the product column layouts."""

    def test_summary_has_17_columns(self, sample_product):
        """Test summary row width and header order."""
        assert len(PRODUCT_COLUMNS) == 17
        assert len(flatten_product(sample_product)) == 17
        assert headers(PRODUCT_COLUMNS)[:3] == ["ID", "POS ID", "Brand ID"]
        assert headers(PRODUCT_COLUMNS)[-2:] == ["Created", "Updated"]

    def test_detailed_has_19_columns(self, sample_product):
        """Test detailed row adds image and calories after category."""
        assert len(PRODUCT_DETAILED_COLUMNS) == 19
        assert len(flatten_product_detailed(sample_product)) == 19

        names = headers(PRODUCT_DETAILED_COLUMNS)
        category_at = names.index("Category")
        assert names[category_at + 1:category_at + 3] == ["Image URL", "Calories"]

    def test_summary_has_no_image_column(self):
        """Test image and calories only live in the JSON blob of the summary."""
        assert "Image URL" not in headers(PRODUCT_COLUMNS)
        assert "Calories" not in headers(PRODUCT_COLUMNS)


class TestFlattenProduct:
    """Tests for field mapping of a full product."""

    def test_scalar_fields(self, sample_product):
        """Test direct field copies."""
        row = as_summary(sample_product)

        assert row["ID"] == "prod-1"
        assert row["POS ID"] == "POS-100"
        assert row["Brand ID"] == "brand-9"
        assert row["Name"] == "Cheeseburger"
        assert row["Price"] == 9.5
        assert row["Quantity"] == 40
        assert row["Status"] == "active"

    def test_flags_render_yes_no(self, sample_product):
        """Test booleans become literal Yes/No text."""
        row = as_summary(sample_product)

        assert row["In Stock"] == "Yes"
        assert row["Not Found"] == "No"

    def test_category_from_nested_reference(self, sample_product):
        """Test category id and name come from the nested object."""
        row = as_summary(sample_product)

        assert row["Category ID"] == "cat-1"
        assert row["Category"] == "Burgers"

    def test_tags_joined(self, sample_product):
        """Test tag list becomes comma-separated text."""
        assert as_summary(sample_product)["Tags"] == "burger, beef"

    def test_string_tags_pass_through(self):
        """Test tags given as text are kept."""
        assert as_summary({"tags": "vegan"})["Tags"] == "vegan"

    def test_epoch_seconds_to_datetime(self, sample_product):
        """Test created/updated epoch seconds become UTC datetimes."""
        row = as_summary(sample_product)

        assert row["Created"] == datetime(2024, 1, 15, 10, 50, 0)
        assert row["Updated"] == datetime(2024, 1, 16, 10, 50, 0)

    def test_modifier_groups_verbatim_json(self, sample_product):
        """Test modifier groups are serialized without field mapping."""
        row = as_summary(sample_product)

        assert json.loads(row["Modifier Groups"]) == sample_product["modifier_groups"]

    def test_detailed_repeats_image_and_calories(self, sample_product):
        """Test detailed row has dedicated image and calories columns."""
        row = as_detailed(sample_product)

        assert row["Image URL"] == "https://cdn.example.com/burger.png"
        assert row["Calories"] == "750"

    def test_summary_and_detailed_share_common_columns(self, sample_product):
        """Test the 17 shared columns hold the same values in both variants."""
        summary = as_summary(sample_product)
        detailed = as_detailed(sample_product)

        for header, value in summary.items():
            assert detailed[header] == value


class TestMissingFields:
    """Tests for defaults when fields are absent."""

    def test_no_custom_fields(self, bare_product):
        """Test image, calories and custom fields JSON defaults."""
        row = as_detailed(bare_product)

        assert row["Image URL"] == ""
        assert row["Calories"] == ""
        assert row["Custom Fields"] == "{}"

    def test_missing_scalars_are_empty_strings(self, bare_product):
        """Test absent scalars, price and quantity included, render as ''."""
        row = as_summary(bare_product)

        for header in ["POS ID", "Name", "Description", "Price", "Quantity",
                       "Status", "Tags", "Category ID", "Category"]:
            assert row[header] == "", header

    def test_missing_flags_render_no(self, bare_product):
        """Test absent booleans render as No."""
        row = as_summary(bare_product)

        assert row["In Stock"] == "No"
        assert row["Not Found"] == "No"

    def test_zero_or_missing_epoch_is_empty(self):
        """Test zero and absent timestamps do not become 1970."""
        row = as_summary({"created": 0})

        assert row["Created"] == ""
        assert row["Updated"] == ""

    def test_missing_modifier_groups(self, bare_product):
        """Test absent modifier groups serialize as an empty array."""
        assert as_summary(bare_product)["Modifier Groups"] == "[]"

    def test_malformed_shapes_do_not_raise(self):
        """Test wrong types are treated as absent."""
        raw = {
            "category": "Burgers",
            "custom_fields": {"image": "x"},
            "in_stock": "yes",
            "created": "yesterday",
        }
        row = as_detailed(raw)

        assert row["Category"] == ""
        assert row["Custom Fields"] == "{}"
        assert row["In Stock"] == "No"
        assert row["Created"] == ""

    def test_non_finite_numbers_are_empty(self):
        """Test NaN and infinity never reach the sheet."""
        row = as_summary({"price": float("nan"), "quantity": float("inf"), "created": float("nan")})

        assert row["Price"] == ""
        assert row["Quantity"] == ""
        assert row["Created"] == ""

    def test_non_dict_record(self):
        """Test a record that is not an object still yields a full row."""
        assert len(flatten_product(None)) == 17


class TestCustomFields:
    """Tests for custom field reduction."""

    def test_image_position_irrelevant(self):
        """Test image is found wherever it sits in the list."""
        raw = {"custom_fields": [
            {"key": "a", "value": 1},
            {"key": "b", "value": 2},
            {"key": "image", "value": "img.png"},
        ]}
        row = as_detailed(raw)

        assert row["Image URL"] == "img.png"
        assert json.loads(row["Custom Fields"])["image"] == "img.png"

    def test_duplicate_key_last_wins(self):
        """Test the last value of a repeated key is kept."""
        raw = {"custom_fields": [
            {"key": "image", "value": "old.png"},
            {"key": "calories", "value": "100"},
            {"key": "image", "value": "new.png"},
        ]}
        row = as_detailed(raw)

        assert row["Image URL"] == "new.png"
        assert json.loads(row["Custom Fields"]) == {"image": "new.png", "calories": "100"}

    def test_json_round_trip_matches_mapping(self, sample_product):
        """Test the JSON column parses back to the built mapping."""
        mapping = build_custom_fields(Product.from_dict(sample_product))
        row = as_summary(sample_product)

        assert json.loads(row["Custom Fields"]) == mapping
        assert set(mapping) == {"calories", "image", "spicy"}

    def test_entries_without_key_skipped(self):
        """Test entries missing a key are ignored."""
        raw = {"custom_fields": [{"value": "orphan"}, {"key": "", "value": "x"}, "junk"]}

        assert as_summary(raw)["Custom Fields"] == "{}"

    def test_structured_value_in_dedicated_column(self):
        """Test a nested custom value becomes JSON text in its column."""
        raw = {"custom_fields": [{"key": "calories", "value": {"min": 300, "max": 500}}]}

        assert as_detailed(raw)["Calories"] == '{"min":300,"max":500}'

    def test_compact_json(self):
        """Test the blob uses compact separators and keeps non-ASCII text."""
        raw = {"custom_fields": [{"key": "origen", "value": "Jalapeño"}]}

        assert as_summary(raw)["Custom Fields"] == '{"origen":"Jalapeño"}'


class TestFlattenProducts:
    """Tests for batch flattening."""

    def test_source_order_kept(self, sample_product, bare_product):
        """Test rows come out in input order."""
        rows = flatten_products([sample_product, bare_product])

        assert [r[0] for r in rows] == ["prod-1", "prod-2"]

    def test_detailed_flag(self, sample_product):
        """Test detailed=True switches the layout."""
        assert len(flatten_products([sample_product], detailed=True)[0]) == 19
