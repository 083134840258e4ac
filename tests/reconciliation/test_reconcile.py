import itertools
import random

import pytest

from ingestion import DecodeError
from models.import_result import fold_name
from models.import_row import ImportRow
from reconciliation import reconcile
from tests.helpers import MENU_PAIRS, make_rows


class TestReconcileScenarios:
    """End-to-end scenarios for reconcile."""

    def test_eleven_rows_four_categories(self):
        """Test 11 distinct pairs over 4 categories are all created."""
        result = reconcile(make_rows(MENU_PAIRS), {})

        assert result.categories_created == 4
        assert result.categories_matched == 0
        assert result.subcategories_created == 11
        assert result.subcategories_duplicate == 0
        assert result.errors == []
        assert [c.name for c in result.categories] == [
            "Beverages",
            "Food",
            "Desserts",
            "Snacks",
        ]

    def test_empty_subcategory_rejected(self):
        """Test a row with an empty subcategory name is excluded and reported."""
        rows = make_rows([("Beverages", "Coffee"), ("Beverages", ""), ("Food", "Pastries")])

        result = reconcile(rows, {})

        assert result.subcategories_created == 2
        assert result.categories_created == 2
        assert len(result.errors) == 1
        assert result.errors[0].row_number == 3
        assert result.errors[0].reason == "missing required field: subcategory_name"

    def test_missing_category_rejected(self):
        """Test a row without a category name is rejected."""
        rows = make_rows([(None, "Coffee"), ("Food", "Pastries")])

        result = reconcile(rows, {})

        assert len(result.errors) == 1
        assert str(result.errors[0]) == "Row 2: missing required field: category_name"
        assert result.categories_created == 1

    def test_whitespace_only_name_counts_as_missing(self):
        """Test names made of whitespace are treated as missing."""
        rows = make_rows([("   ", "Coffee"), ("Food", "  \t ")])

        result = reconcile(rows, {})

        assert [e.reason for e in result.errors] == [
            "missing required field: category_name",
            "missing required field: subcategory_name",
        ]
        assert result.valid_rows == 0
        assert result.success is False

    def test_duplicate_pair_first_wins(self):
        """Test the first occurrence of a pair wins and the second is a duplicate."""
        rows = [
            ImportRow(2, "Beverages", "Coffee", subcategory_description="Hot drinks"),
            ImportRow(3, "Beverages", "Coffee", subcategory_description="Changed"),
        ]

        result = reconcile(rows, {})

        assert result.subcategories_created == 1
        assert result.subcategories_duplicate == 1
        assert result.errors == []
        assert len(result.subcategories) == 1
        assert result.subcategories[0].description == "Hot drinks"

    def test_duplicate_pair_ignores_case(self):
        """Test duplicate detection is case-insensitive on both names."""
        rows = make_rows([("Beverages", "Coffee"), ("BEVERAGES", "coffee")])

        result = reconcile(rows, {})

        assert result.subcategories_created == 1
        assert result.subcategories_duplicate == 1
        assert result.categories_created == 1

    def test_empty_input_is_fatal(self):
        """Test an empty row sequence raises a decode-level error."""
        with pytest.raises(DecodeError, match="File is empty"):
            reconcile([], {})


class TestCategoryMerging:
    """Tests for category working-set behaviour."""

    def test_first_occurrence_keeps_casing(self):
        """Test the first-seen casing of a category name is kept."""
        rows = make_rows([("beverages", "Coffee"), ("Beverages", "Tea")])

        result = reconcile(rows, {})

        assert len(result.categories) == 1
        assert result.categories[0].name == "beverages"

    def test_later_rows_do_not_overwrite_category_attributes(self):
        """Test description and order come from the first occurrence only."""
        rows = [
            ImportRow(2, "Food", "Pastries", category_description="Baked", category_display_order="1"),
            ImportRow(3, "Food", "Salads", category_description="Other", category_display_order="9"),
        ]

        result = reconcile(rows, {})

        category = result.categories[0]
        assert category.description == "Baked"
        assert category.display_order == 1

    def test_existing_category_matched_case_insensitively(self):
        """Test a category already persisted under other casing is matched."""
        rows = make_rows([("beverages", "Coffee"), ("Food", "Pastries")])

        result = reconcile(rows, {"Beverages": 7})

        assert result.categories_matched == 1
        assert result.categories_created == 1
        beverages = result.categories[0]
        assert beverages.matched is True
        assert beverages.category_id == 7
        assert result.subcategories[0].category_id == 7

    def test_non_ascii_case_is_significant(self):
        """Test only ASCII letters ignore case, as in the database index."""
        rows = make_rows([("Café", "Latte"), ("CAFÉ", "Mocha"), ("cafÉ", "Tea")])

        result = reconcile(rows, {"CAFÉ": 5})

        assert [c.name for c in result.categories] == ["Café", "CAFÉ"]
        assert result.categories_created == 1
        assert result.categories_matched == 1
        assert result.categories[1].category_id == 5
        assert [s.category_key for s in result.subcategories] == ["café", "cafÉ", "cafÉ"]

    def test_existing_categories_not_in_file_are_ignored(self):
        """Test persisted categories absent from the file are not counted."""
        result = reconcile(make_rows([("Food", "Pastries")]), {"Beverages": 1, "Snacks": 2})

        assert result.categories_matched == 0
        assert result.categories_created == 1
        assert len(result.categories) == 1

    def test_rejected_rows_do_not_create_categories(self):
        """Test a category only referenced by rejected rows is not created."""
        rows = make_rows([("Ghost", ""), ("Food", "Pastries")])

        result = reconcile(rows, {})

        assert [c.name for c in result.categories] == ["Food"]


class TestRowValidation:
    """Tests for row-level validation rules."""

    def test_display_orders_parsed(self):
        """Test display orders accept ints, whole floats and numeric strings."""
        rows = [
            ImportRow(2, "Food", "Pastries", category_display_order=2, subcategory_display_order=" 5 "),
            ImportRow(3, "Drinks", "Tea", category_display_order=3.0, subcategory_display_order=None),
        ]

        result = reconcile(rows, {})

        assert result.errors == []
        assert result.categories[0].display_order == 2
        assert result.categories[1].display_order == 3
        assert result.subcategories[0].display_order == 5
        assert result.subcategories[1].display_order is None

    def test_invalid_display_order_rejected(self):
        """Test a non-numeric display order rejects the row."""
        rows = [
            ImportRow(2, "Food", "Pastries", subcategory_display_order="first"),
            ImportRow(3, "Food", "Salads", category_display_order="2.5"),
        ]

        result = reconcile(rows, {})

        assert [e.reason for e in result.errors] == [
            "invalid display order: subcategory_display_order",
            "invalid display order: category_display_order",
        ]
        assert result.categories == []

    @pytest.mark.parametrize(
        "order",
        ["99999999999999999999", 2**63, -(2**63) - 1, 1e30],
    )
    def test_display_order_out_of_range_rejected(self, order):
        """Test orders that do not fit a SQLite INTEGER reject the row."""
        rows = [
            ImportRow(2, "Tea", "Green", subcategory_display_order=1),
            ImportRow(3, "Tea", "Black", subcategory_display_order=order),
            ImportRow(4, "Coffee", "Latte", category_display_order=order),
        ]

        result = reconcile(rows, {})

        assert [str(e) for e in result.errors] == [
            "Row 3: invalid display order: subcategory_display_order",
            "Row 4: invalid display order: category_display_order",
        ]
        assert [s.name for s in result.subcategories] == ["Green"]

    def test_display_order_range_limits_accepted(self):
        """Test the smallest and largest SQLite INTEGER are valid orders."""
        rows = [
            ImportRow(2, "Tea", "Green", subcategory_display_order=str(2**63 - 1)),
            ImportRow(3, "Tea", "Black", subcategory_display_order=-(2**63)),
        ]

        result = reconcile(rows, {})

        assert result.errors == []
        assert [s.display_order for s in result.subcategories] == [2**63 - 1, -(2**63)]

    def test_blank_display_order_is_none(self):
        """Test an empty order cell is treated as not provided."""
        rows = [ImportRow(2, "Food", "Pastries", subcategory_display_order="  ")]

        result = reconcile(rows, {})

        assert result.errors == []
        assert result.subcategories[0].display_order is None

    def test_name_too_long_rejected(self):
        """Test names over 100 characters are rejected."""
        rows = make_rows([("F" * 101, "Pastries"), ("Food", "S" * 101), ("Food", "S" * 100)])

        result = reconcile(rows, {})

        assert [e.reason for e in result.errors] == [
            "name too long: category_name",
            "name too long: subcategory_name",
        ]
        assert result.subcategories_created == 1

    def test_subcategory_named_like_category_rejected(self):
        """Test a subcategory with its parent's name is rejected."""
        rows = make_rows([("Coffee", "coffee")])

        result = reconcile(rows, {})

        assert result.errors[0].reason == "subcategory name matches category name"

    def test_names_are_trimmed(self):
        """Test surrounding whitespace is removed from names and descriptions."""
        rows = [ImportRow(2, "  Food ", " Pastries  ", subcategory_description="  Fresh ")]

        result = reconcile(rows, {})

        assert result.categories[0].name == "Food"
        assert result.subcategories[0].name == "Pastries"
        assert result.subcategories[0].description == "Fresh"

    def test_error_rows_keep_file_numbering(self):
        """Test errors report the row number carried by each row."""
        rows = [
            ImportRow(2, "Food", "Pastries"),
            ImportRow(5, "", "Tea"),
            ImportRow(9, "Food", None),
        ]

        result = reconcile(rows, {})

        assert [e.row_number for e in result.errors] == [5, 9]


class TestCountInvariants:
    """Tests for the invariants between counts and input."""

    def _check(self, rows, existing=None, existing_subcategories=None):
        result = reconcile(rows, existing or {}, existing_subcategories)
        valid = [
            r
            for r in rows
            if (r.category_name or "").strip() and (r.subcategory_name or "").strip()
        ]
        distinct_categories = {fold_name(r.category_name.strip()) for r in valid}

        assert result.categories_created + result.categories_matched == len(distinct_categories)
        assert result.subcategories_created + result.subcategories_duplicate == len(valid)
        assert result.valid_rows == len(valid)
        assert len(result.errors) == len(rows) - len(valid)
        return result

    def test_invariants_with_duplicates_and_errors(self):
        """Test count invariants hold for a mixed input."""
        pairs = MENU_PAIRS + [("food", "pastries"), ("Snacks", ""), ("", "Tea"), ("Beverages", "Tea")]
        self._check(make_rows(pairs), existing={"Snacks": 3})

    def test_invariants_with_existing_subcategories(self):
        """Test count invariants hold when some pairs already exist."""
        self._check(
            make_rows(MENU_PAIRS),
            existing={"Beverages": 1},
            existing_subcategories={("Beverages", "Coffee"), ("beverages", "TEA")},
        )


class TestOrderIndependence:
    """Tests that row order does not change the outcome."""

    def _outcome(self, rows):
        result = reconcile(rows, {})
        categories = {c.key for c in result.categories}
        subcategories = {s.key for s in result.subcategories}
        return categories, subcategories, result.categories_created, result.subcategories_created

    def test_permutations_give_same_sets(self):
        """Test shuffled inputs produce the same categories and subcategories."""
        pairs = MENU_PAIRS + [("Food", "Pastries"), ("beverages", "TEA")]
        expected = self._outcome(make_rows(pairs))

        shuffler = random.Random(1234)
        for _ in range(20):
            shuffled = list(pairs)
            shuffler.shuffle(shuffled)
            assert self._outcome(make_rows(shuffled)) == expected

    def test_all_permutations_of_small_input(self):
        """Test every ordering of a small input gives the same result."""
        pairs = [("A", "x"), ("a", "X"), ("B", "y"), ("A", "z")]
        outcomes = {
            (frozenset(c), frozenset(s), cc, sc)
            for c, s, cc, sc in (
                self._outcome(make_rows(p)) for p in itertools.permutations(pairs)
            )
        }
        assert len(outcomes) == 1


class TestExistingSubcategories:
    """Tests for subcategories that already exist in storage."""

    def test_known_pairs_counted_as_duplicates(self):
        """Test pairs that exist already are duplicates, not new."""
        rows = make_rows([("Beverages", "Coffee"), ("Beverages", "Latte")])

        result = reconcile(rows, {"Beverages": 1}, {("beverages", "coffee")})

        assert result.subcategories_created == 1
        assert result.subcategories_duplicate == 1
        assert [s.name for s in result.subcategories] == ["Latte"]

    def test_second_run_creates_nothing(self):
        """Test reconciling the same rows against their own output is a no-op."""
        rows = make_rows(MENU_PAIRS)
        first = reconcile(rows, {})

        existing = {c.name: i for i, c in enumerate(first.categories, start=1)}
        existing_subcategories = {
            (next(c.name for c in first.categories if c.key == s.category_key), s.name)
            for s in first.subcategories
        }
        second = reconcile(rows, existing, existing_subcategories)

        assert second.categories_created == 0
        assert second.categories_matched == 4
        assert second.subcategories_created == 0
        assert second.subcategories_duplicate == 11
