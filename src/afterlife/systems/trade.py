"""
Inventory gateway.

The engine treats items as an external concern. It only needs to add and
remove items, know their prices, and know what meters an item changes when
used. Money itself lives on the `money` meter and moves through the ledger.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from ..state.schema import Meter

# Item granted by a lucky expedition
BONUS_ITEM_ID = "sealed-can"


class ItemSpec(BaseModel):
    """Catalog data for one item."""
    id: str
    name: str
    price: int = 0  # Purchase price; 0 means not for sale
    effects: dict[Meter, int] = Field(default_factory=dict)


class InventoryLine(BaseModel):
    id: str
    qty: int = 0


DEFAULT_ITEMS: list[ItemSpec] = [
    ItemSpec(id="compressed-biscuit", name="Compressed biscuit", price=150,
             effects={Meter.SATIETY: 15}),
    ItemSpec(id="bottled-water", name="Bottled water", price=160,
             effects={Meter.HYDRATION: 20}),
    ItemSpec(id="match-box", name="Matches", price=150),
    ItemSpec(id="military-ration", name="Military ration", price=350,
             effects={Meter.SATIETY: 30, Meter.HYDRATION: 10}),
    ItemSpec(id="medkit", name="Medkit", price=450,
             effects={Meter.HEALTH: 25}),
    ItemSpec(id="walkie-talkie", name="Walkie-talkie", price=480),
    ItemSpec(id="sealed-can", name="Sealed can", price=0,
             effects={Meter.SATIETY: 10}),
]


@runtime_checkable
class InventoryGateway(Protocol):
    """What the engine needs from an inventory/trade subsystem."""

    def add_item(self, item_id: str, qty: int = 1) -> None:
        ...

    def remove_item(self, item_id: str, qty: int = 1) -> bool:
        """Remove items. Returns False (and removes nothing) if short."""
        ...

    def quantity(self, item_id: str) -> int:
        ...

    def price_of(self, item_id: str) -> int | None:
        """Purchase price, or None if the item is unknown."""
        ...

    def effects_of(self, item_id: str) -> dict[Meter, int]:
        """Meter changes applied when one unit is used."""
        ...

    def name_of(self, item_id: str) -> str:
        """Display name, falling back to the id."""
        ...


class Inventory:
    """
    In-memory inventory with a fixed item catalog.

    Starts with two biscuits and one bottle of water.
    """

    def __init__(
        self,
        items: list[ItemSpec] | None = None,
        starting: dict[str, int] | None = None,
    ):
        self.catalog: dict[str, ItemSpec] = {
            spec.id: spec for spec in (items or DEFAULT_ITEMS)
        }
        if starting is None:
            starting = {"compressed-biscuit": 2, "bottled-water": 1}
        self.lines: dict[str, InventoryLine] = {}
        for item_id, qty in starting.items():
            self.add_item(item_id, qty)

    def add_item(self, item_id: str, qty: int = 1) -> None:
        if qty <= 0:
            return
        line = self.lines.setdefault(item_id, InventoryLine(id=item_id))
        line.qty += qty

    def remove_item(self, item_id: str, qty: int = 1) -> bool:
        line = self.lines.get(item_id)
        if line is None or line.qty < qty:
            return False
        line.qty -= qty
        if line.qty == 0:
            del self.lines[item_id]
        return True

    def quantity(self, item_id: str) -> int:
        line = self.lines.get(item_id)
        return line.qty if line else 0

    def price_of(self, item_id: str) -> int | None:
        spec = self.catalog.get(item_id)
        return spec.price if spec else None

    def effects_of(self, item_id: str) -> dict[Meter, int]:
        spec = self.catalog.get(item_id)
        return dict(spec.effects) if spec else {}

    def name_of(self, item_id: str) -> str:
        spec = self.catalog.get(item_id)
        return spec.name if spec else item_id

    def to_dict(self) -> dict[str, int]:
        return {item_id: line.qty for item_id, line in self.lines.items()}
