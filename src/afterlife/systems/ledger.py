"""
Resource ledger.

Owns the bounded-update rules for the eight meters. Every operation is total:
values are clamped, never rejected, and no meter is ever stored negative.
The only failure signal is consume() returning False.
"""

from ..state.schema import Meter, ResourceState

# (floor, ceiling) per meter; None means unbounded above
METER_BOUNDS: dict[Meter, tuple[int, int | None]] = {
    Meter.STAMINA: (0, 120),
    Meter.SATIETY: (0, 100),
    Meter.HYDRATION: (0, 100),
    Meter.HEALTH: (0, 100),
    Meter.COMBAT: (0, None),
    Meter.SOCIAL: (0, 100),
    Meter.SANITY: (0, 100),
    Meter.MONEY: (0, None),
}

# Weekly story choices may lift sanity past its everyday ceiling
SANITY_STORY_CEILING = 120


class ResourceLedger:
    """
    Bounded arithmetic over a ResourceState.

    The ledger does not copy the state; it mutates the instance it wraps.
    """

    def __init__(self, state: ResourceState, max_stamina: int = 120):
        self.state = state
        self.max_stamina = max_stamina

    def get(self, meter: Meter) -> int:
        return self.state.get(meter)

    def bounds(self, meter: Meter) -> tuple[int, int | None]:
        if meter == Meter.STAMINA:
            return 0, self.max_stamina
        return METER_BOUNDS[meter]

    def consume(self, meter: Meter, amount: int) -> bool:
        """
        Guarded subtraction.

        Returns False and leaves the meter untouched when it holds less than
        `amount`. A non-positive amount is a successful no-op.
        """
        if amount <= 0:
            return True
        current = self.get(meter)
        if current < amount:
            return False
        floor, _ = self.bounds(meter)
        self.state.set(meter, max(floor, current - amount))
        return True

    def adjust(self, meter: Meter, delta: int, ceiling: int | None = None) -> int:
        """
        Add `delta` and clamp into the meter's range.

        `ceiling` overrides the meter's usual ceiling for this call. A gain
        never lowers a meter that already sits above the ceiling in use.

        Returns the stored value.
        """
        floor, upper = self.bounds(meter)
        if ceiling is not None:
            upper = ceiling

        current = self.get(meter)
        value = max(floor, current + delta)
        if upper is not None:
            value = min(value, max(upper, current))
        self.state.set(meter, value)
        return value

    def recover(self, amount: int) -> int:
        """Stamina gain clamped to [0, max_stamina]."""
        return self.adjust(Meter.STAMINA, amount)

    def apply(self, effects: dict[Meter, int]) -> dict[Meter, int]:
        """Apply several unconditional adjustments; returns stored values."""
        return {meter: self.adjust(meter, delta) for meter, delta in effects.items()}
