"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from tms.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Quantity:
    """A strictly positive decimal quantity.

    Uses Decimal so recipe multiplication (5 x 0.250 kg) stays exact.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if not self.value.is_finite():
            raise ValidationError(f"Quantity must be finite, got {self.value}")
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __mul__(self, factor: Decimal) -> Quantity:
        return Quantity(self.value * factor)

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(amount: str | int | Decimal) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, float):
            amount = str(amount)
        try:
            return Quantity(Decimal(amount))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValidationError(f"Invalid quantity: {amount!r}") from exc


@dataclass(frozen=True)
class RawItemLine:
    """A line that moves a raw inventory item directly."""

    inventory_item_id: int
    quantity: Quantity


@dataclass(frozen=True)
class RecipeLine:
    """A line denominated in a recipe; resolved to ingredients by the reconciler."""

    recipe_id: int
    quantity: Quantity


# A transfer line is exactly one of the two; "both" or "neither" cannot exist.
TransferLine = Union[RawItemLine, RecipeLine]


def make_line(
    inventory_item_id: int | None,
    recipe_id: int | None,
    quantity: str | int | Decimal,
) -> TransferLine:
    """Build a line from the two nullable ids used at the service boundary."""
    if inventory_item_id is not None and recipe_id is not None:
        raise ValidationError(
            "A transfer line references either an inventory item or a recipe, not both"
        )
    if inventory_item_id is None and recipe_id is None:
        raise ValidationError(
            "A transfer line must reference an inventory item or a recipe"
        )
    qty = Quantity.of(quantity)
    if recipe_id is not None:
        return RecipeLine(recipe_id=recipe_id, quantity=qty)
    return RawItemLine(inventory_item_id=inventory_item_id, quantity=qty)  # type: ignore[arg-type]
