import unittest
from datetime import date

from stocktake.core.errors import NotFoundError, ValidationError
from stocktake.database import create_db_engine, create_session_factory, init_db
from stocktake.models.inventory import Inventory
from stocktake.models.product import Product
from stocktake.services.catalog_service import delete_product
from stocktake.services.inventory_service import find_entry
from stocktake.services.reconciliation_service import (
    add_or_increment,
    apply_entry_update,
    quick_add,
    remove,
    replace,
)


class ReconciliationTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite:///:memory:")
        init_db(self.engine)
        self.db = create_session_factory(self.engine)()

        self.product = Product(
            name="Mineral Water",
            unit="packet",
            packet_quantity=12,
            category="Drinks",
            location="Cold Room",
        )
        self.inventory = Inventory(
            name="Weekly count",
            store_name="Downtown",
            date=date(2024, 3, 1),
        )
        self.db.add_all([self.product, self.inventory])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def current_quantity(self):
        self.db.refresh(self.product)
        return self.product.current_quantity

    def entry(self, inventory=None):
        return find_entry(inventory or self.inventory, self.product.id)


class AddOrIncrementTest(ReconciliationTestCase):
    def test_add_to_empty_inventory(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 10)

        self.assertEqual(self.entry().quantity, 10)
        self.assertEqual(self.current_quantity(), 10)
        self.assertEqual(len(self.inventory.entries), 1)

    def test_second_add_increments_same_entry(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 10)
        add_or_increment(self.db, self.inventory.id, self.product.id, 2.5)

        self.assertEqual(len(self.inventory.entries), 1)
        self.assertEqual(self.entry().quantity, 12.5)
        self.assertEqual(self.current_quantity(), 12.5)

    def test_contributions_from_two_inventories_are_summed(self):
        other = Inventory(name="Weekly count", store_name="Harbour", date=date(2024, 3, 1))
        self.db.add(other)
        self.db.commit()

        add_or_increment(self.db, self.inventory.id, self.product.id, 10)
        add_or_increment(self.db, other.id, self.product.id, 4)

        self.assertEqual(self.entry(other).quantity, 4)
        self.assertEqual(self.current_quantity(), 14)

    def test_history_accumulates_per_store_and_day(self):
        later = Inventory(name="Next week", store_name="Downtown", date=date(2024, 3, 8))
        self.db.add(later)
        self.db.commit()

        add_or_increment(self.db, self.inventory.id, self.product.id, 10)
        add_or_increment(self.db, self.inventory.id, self.product.id, 5)
        add_or_increment(self.db, later.id, self.product.id, 3)

        self.db.refresh(self.product)
        history = [(h.store_name, h.date, h.quantity) for h in self.product.quantity_history]
        self.assertEqual(
            history,
            [("Downtown", date(2024, 3, 1), 15), ("Downtown", date(2024, 3, 8), 3)],
        )

    def test_negative_delta_rejected_without_writes(self):
        with self.assertRaises(ValidationError):
            add_or_increment(self.db, self.inventory.id, self.product.id, -1)
        self.assertIsNone(self.entry())
        self.assertEqual(self.current_quantity(), 0)

    def test_non_finite_delta_rejected_without_writes(self):
        for value in (float("inf"), float("nan"), 10**400):
            with self.assertRaises(ValidationError):
                add_or_increment(self.db, self.inventory.id, self.product.id, value)
        self.assertIsNone(self.entry())
        self.assertEqual(self.current_quantity(), 0)
        self.db.refresh(self.product)
        self.assertEqual(self.product.quantity_history, [])

    def test_missing_inventory_or_product(self):
        with self.assertRaises(NotFoundError):
            add_or_increment(self.db, 999, self.product.id, 1)
        with self.assertRaises(NotFoundError):
            add_or_increment(self.db, self.inventory.id, 999, 1)
        self.assertEqual(self.inventory.entries, [])


class ReplaceTest(ReconciliationTestCase):
    def setUp(self):
        super().setUp()
        add_or_increment(self.db, self.inventory.id, self.product.id, 5)

    def test_replace_applies_difference(self):
        replace(self.db, self.inventory.id, self.product.id, 8)

        self.assertEqual(self.entry().quantity, 8)
        self.assertEqual(self.current_quantity(), 8)

    def test_replace_downwards(self):
        replace(self.db, self.inventory.id, self.product.id, 2)

        self.assertEqual(self.entry().quantity, 2)
        self.assertEqual(self.current_quantity(), 2)

    def test_negative_quantity_rejected_without_changes(self):
        with self.assertRaises(ValidationError):
            replace(self.db, self.inventory.id, self.product.id, -1)

        self.assertEqual(self.entry().quantity, 5)
        self.assertEqual(self.current_quantity(), 5)

    def test_non_finite_replacement_rejected(self):
        for value in (float("inf"), float("-inf"), float("nan")):
            with self.assertRaises(ValidationError):
                replace(self.db, self.inventory.id, self.product.id, value)
        self.assertEqual(self.entry().quantity, 5)
        self.assertEqual(self.current_quantity(), 5)

    def test_replace_is_idempotent(self):
        replace(self.db, self.inventory.id, self.product.id, 7)
        replace(self.db, self.inventory.id, self.product.id, 7)

        self.assertEqual(self.entry().quantity, 7)
        self.assertEqual(self.current_quantity(), 7)

    def test_missing_entry_is_not_inserted(self):
        other = Product(name="Flour", unit="kilogram", category="Dry Goods", location="Storage")
        self.db.add(other)
        self.db.commit()

        with self.assertRaises(NotFoundError):
            replace(self.db, self.inventory.id, other.id, 3)
        self.assertIsNone(find_entry(self.inventory, other.id))
        self.db.refresh(other)
        self.assertEqual(other.current_quantity, 0)

    def test_put_add_requires_existing_entry(self):
        other = Product(name="Flour", unit="kilogram", category="Dry Goods", location="Storage")
        self.db.add(other)
        self.db.commit()

        with self.assertRaises(NotFoundError):
            apply_entry_update(self.db, self.inventory.id, other.id, 3, action="add")

        apply_entry_update(self.db, self.inventory.id, self.product.id, 3, action="add")
        self.assertEqual(self.entry().quantity, 8)
        self.assertEqual(self.current_quantity(), 8)

    def test_put_rejects_unknown_action(self):
        with self.assertRaises(ValidationError):
            apply_entry_update(self.db, self.inventory.id, self.product.id, 3, action="set")


class AddThenReplaceTest(ReconciliationTestCase):
    def make_counted_pair(self, prior):
        product = Product(name="Flour", unit="kilogram", category="Dry Goods", location="Storage")
        inventory = Inventory(name="Weekly count", store_name="Downtown", date=date(2024, 3, 1))
        self.db.add_all([product, inventory])
        self.db.commit()
        add_or_increment(self.db, inventory.id, product.id, prior)
        return inventory, product

    def test_add_then_replace_matches_replace_alone(self):
        prior = 5
        for delta in (0, 1, 2.5, 40):
            with self.subTest(delta=delta):
                inventory_a, product_a = self.make_counted_pair(prior)
                inventory_b, product_b = self.make_counted_pair(prior)

                add_or_increment(self.db, inventory_a.id, product_a.id, delta)
                replace(self.db, inventory_a.id, product_a.id, prior + delta)
                replace(self.db, inventory_b.id, product_b.id, prior + delta)

                self.db.refresh(product_a)
                self.db.refresh(product_b)
                self.assertEqual(product_a.current_quantity, product_b.current_quantity)
                self.assertEqual(product_a.current_quantity, prior + delta)
                self.assertEqual(
                    find_entry(inventory_a, product_a.id).quantity,
                    find_entry(inventory_b, product_b.id).quantity,
                )


class NotesPolicyTest(ReconciliationTestCase):
    def test_missing_notes_keep_stored_note(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 1, notes="first count")
        add_or_increment(self.db, self.inventory.id, self.product.id, 1)
        replace(self.db, self.inventory.id, self.product.id, 4)

        self.assertEqual(self.entry().notes, "first count")

    def test_empty_string_clears_note(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 1, notes="first count")
        replace(self.db, self.inventory.id, self.product.id, 4, notes="")

        self.assertEqual(self.entry().notes, "")

    def test_invalid_notes_rejected_on_every_path(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 1)
        too_long = "x" * 501

        with self.assertRaises(ValidationError):
            add_or_increment(self.db, self.inventory.id, self.product.id, 1, notes=too_long)
        with self.assertRaises(ValidationError):
            replace(self.db, self.inventory.id, self.product.id, 2, notes=too_long)
        with self.assertRaises(ValidationError):
            replace(self.db, self.inventory.id, self.product.id, 2, notes=42)

        self.assertEqual(self.entry().quantity, 1)
        self.assertEqual(self.current_quantity(), 1)


class RemoveTest(ReconciliationTestCase):
    def test_remove_keeps_current_quantity(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 10)

        with self.assertLogs("stocktake.services.reconciliation_service", level="WARNING") as logs:
            remove(self.db, self.inventory.id, self.product.id)
        record = logs.records[-1]
        self.assertEqual(record.inventory_id, self.inventory.id)
        self.assertEqual(record.product_id, self.product.id)

        self.assertIsNone(self.entry())
        self.assertEqual(self.current_quantity(), 10)

    def test_remove_missing_entry(self):
        with self.assertRaises(NotFoundError):
            remove(self.db, self.inventory.id, self.product.id)
        with self.assertRaises(NotFoundError):
            remove(self.db, 999, self.product.id)

    def test_orphaned_entry_can_be_removed(self):
        add_or_increment(self.db, self.inventory.id, self.product.id, 10)
        product_id = self.product.id
        delete_product(self.db, product_id)

        self.db.refresh(self.inventory)
        self.assertIsNotNone(find_entry(self.inventory, product_id))

        remove(self.db, self.inventory.id, product_id)
        self.assertIsNone(find_entry(self.inventory, product_id))


class QuickAddTest(ReconciliationTestCase):
    def test_quick_add_packets(self):
        quick_add(self.db, self.inventory.id, self.product.id, boxes=3, units=4)

        entry = self.entry()
        self.assertEqual(entry.quantity, 40)
        self.assertEqual(entry.notes, "Added 3 packets and 4 units")
        self.assertEqual(self.current_quantity(), 40)

    def test_quick_replace(self):
        quick_add(self.db, self.inventory.id, self.product.id, boxes=3, units=4)
        quick_add(self.db, self.inventory.id, self.product.id, boxes=1, units=0, action="replace")

        entry = self.entry()
        self.assertEqual(entry.quantity, 12)
        self.assertEqual(entry.notes, "Updated 1 packets and 0 units")
        self.assertEqual(self.current_quantity(), 12)

    def test_negative_quick_add_rejected(self):
        with self.assertRaises(ValidationError):
            quick_add(self.db, self.inventory.id, self.product.id, boxes=-1, units=0)
        self.assertIsNone(self.entry())

    def test_unknown_action_rejected(self):
        with self.assertRaises(ValidationError):
            quick_add(self.db, self.inventory.id, self.product.id, boxes=1, action="set")


if __name__ == "__main__":
    unittest.main()
