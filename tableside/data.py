"""Generated default tables and menu data."""

from __future__ import annotations

from uuid import uuid4

from tableside.config import TABLE_COUNT
from tableside.constant import MENU_CATEGORIES, MENU_ITEMS, MODIFIER_GROUPS
from tableside.models import MenuCategory, MenuItem, ModifierGroup, ModifierOption, Table


def _capacity_for(number: int) -> int:
    if number % 3 == 0:
        return 6
    if number % 2 == 0:
        return 4
    return 2


def _initial_status_for(number: int) -> str:
    if number % 5 == 0:
        return "occupied"
    if number % 7 == 0:
        return "reserved"
    return "available"


def generate_tables(count: int = TABLE_COUNT) -> list[Table]:
    """Build the default floor plan with fresh table ids."""
    return [
        Table(
            table_id=uuid4().hex,
            number=number,
            capacity=_capacity_for(number),
            status=_initial_status_for(number),  # type: ignore[arg-type]
        )
        for number in range(1, count + 1)
    ]


def _modifier_group(group_id: str) -> ModifierGroup:
    raw = MODIFIER_GROUPS[group_id]
    return ModifierGroup(
        group_id=group_id,
        name=str(raw["name"]),
        required=bool(raw["required"]),
        multi_select=bool(raw["multi_select"]),
        options=tuple(
            ModifierOption(option_id=f"{group_id}.{option_id}", name=name, price=float(price))
            for option_id, name, price in raw["options"]  # type: ignore[union-attr]
        ),
    )


def generate_menu_items() -> list[MenuItem]:
    items: list[MenuItem] = []
    for item_id, raw in MENU_ITEMS.items():
        modifiers = tuple(_modifier_group(group_id) for group_id in raw["modifiers"])  # type: ignore[union-attr]
        items.append(
            MenuItem(
                item_id=item_id,
                name=str(raw["name"]),
                description=str(raw["description"]),
                price=float(raw["price"]),  # type: ignore[arg-type]
                category=str(raw["category"]),
                available=bool(raw["available"]),
                preparation_minutes=int(raw["preparation_minutes"]),  # type: ignore[call-overload]
                customizable=bool(modifiers),
                modifiers=modifiers,
            )
        )
    return items


def generate_categories() -> list[MenuCategory]:
    return [MenuCategory(category_id=f"cat-{slug}", name=name, slug=slug) for slug, name in MENU_CATEGORIES.items()]
