"""Click parameter helpers shared by the command modules."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from tms.application.dto import TransferLineSpec

_KINDS = ("item", "recipe")


class DecimalType(click.ParamType):
    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not result.is_finite():
            self.fail(f"{value!r} is not a valid number", param, ctx)
        return result


DECIMAL = DecimalType()

# Naive dates are read as UTC by the Transfer aggregate.
DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M"])


def parse_items(raw: str) -> list[TransferLineSpec]:
    """Parse 'item:3:10,recipe:7:2.5' into TransferLineSpec list."""
    specs: list[TransferLineSpec] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [p.strip() for p in chunk.split(":")]
        if len(parts) != 3 or parts[0].lower() not in _KINDS:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'item:ID:QTY' or 'recipe:ID:QTY'."
            )
        kind, ref, qty = parts
        try:
            ref_id = int(ref)
        except ValueError:
            raise click.BadParameter(f"Invalid id '{ref}' in '{chunk}'.")
        try:
            quantity = Decimal(qty)
        except InvalidOperation:
            raise click.BadParameter(f"Invalid quantity '{qty}' in '{chunk}'.")
        if kind.lower() == "recipe":
            specs.append(TransferLineSpec(quantity=quantity, recipe_id=ref_id))
        else:
            specs.append(TransferLineSpec(quantity=quantity, inventory_item_id=ref_id))
    if not specs:
        raise click.BadParameter("At least one item is required.")
    return specs
