"""Tests for the inventory gateway."""

from afterlife.state.schema import Meter
from afterlife.systems.trade import BONUS_ITEM_ID, Inventory, InventoryGateway, ItemSpec


class TestInventory:

    def test_starting_items(self):
        inventory = Inventory()
        assert inventory.to_dict() == {"compressed-biscuit": 2, "bottled-water": 1}

    def test_implements_gateway(self):
        assert isinstance(Inventory(), InventoryGateway)

    def test_add_and_remove(self):
        inventory = Inventory(starting={})
        inventory.add_item("medkit", 2)
        assert inventory.remove_item("medkit")
        assert inventory.quantity("medkit") == 1

    def test_remove_short_removes_nothing(self):
        inventory = Inventory()
        assert inventory.remove_item("bottled-water", 2) is False
        assert inventory.quantity("bottled-water") == 1

    def test_empty_line_dropped(self):
        inventory = Inventory()
        inventory.remove_item("bottled-water")
        assert "bottled-water" not in inventory.to_dict()

    def test_non_positive_add_ignored(self):
        inventory = Inventory(starting={})
        inventory.add_item("medkit", 0)
        assert inventory.to_dict() == {}

    def test_catalog_lookups(self):
        inventory = Inventory()
        assert inventory.price_of("medkit") == 450
        assert inventory.price_of("rocket") is None
        assert inventory.effects_of("medkit") == {Meter.HEALTH: 25}
        assert inventory.effects_of("rocket") == {}
        assert inventory.name_of(BONUS_ITEM_ID) == "Sealed can"
        assert inventory.name_of("rocket") == "rocket"

    def test_effects_are_copied(self):
        inventory = Inventory()
        inventory.effects_of("medkit")[Meter.HEALTH] = 999
        assert inventory.effects_of("medkit") == {Meter.HEALTH: 25}

    def test_custom_catalog(self):
        items = [ItemSpec(id="tea", name="Tea", price=10, effects={Meter.SANITY: 3})]
        inventory = Inventory(items=items, starting={"tea": 1})
        assert inventory.price_of("tea") == 10
        assert inventory.price_of("medkit") is None
