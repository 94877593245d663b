"""Menu catalog and modifier selection rules."""

from __future__ import annotations

from typing import Mapping, Sequence

from tableside.data import generate_categories, generate_menu_items
from tableside.errors import NotFoundError, ValidationError
from tableside.models import (
    MenuCategory,
    MenuItem,
    ModifierGroup,
    OrderItemDraft,
    SelectedModifier,
    SelectedOption,
)
from tableside.persistence import (
    MENU_CATEGORIES_KEY,
    MENU_ITEMS_KEY,
    LocalStore,
    load_collection,
    save_collection,
)
from tableside.records import category_from_record, category_to_record, menu_item_from_record, menu_item_to_record

Selections = Mapping[str, Sequence[str]]


def validate_group_selection(group: ModifierGroup, option_ids: Sequence[str]) -> None:
    """Raise ValidationError unless option_ids is a legal choice for group."""
    known = {option.option_id for option in group.options}
    unknown = [option_id for option_id in option_ids if option_id not in known]
    if unknown:
        raise ValidationError(f"{group.name}: unknown option(s) {', '.join(unknown)}")
    if len(set(option_ids)) != len(option_ids):
        raise ValidationError(f"{group.name}: option selected more than once")
    if not group.multi_select and len(option_ids) > 1:
        raise ValidationError(f"{group.name}: choose only one option")
    if group.required and not option_ids:
        raise ValidationError(f"{group.name} is required")


class MenuCatalog:
    """Read-only menu items and categories."""

    def __init__(
        self,
        items: list[MenuItem] | None = None,
        categories: list[MenuCategory] | None = None,
        store: LocalStore | None = None,
    ) -> None:
        if items is None:
            items = load_collection(store, MENU_ITEMS_KEY, menu_item_from_record, generate_menu_items)
        if categories is None:
            categories = load_collection(store, MENU_CATEGORIES_KEY, category_from_record, generate_categories)
        self._items: dict[str, MenuItem] = {item.item_id: item for item in items}
        self._categories = list(categories)
        save_collection(store, MENU_ITEMS_KEY, self.items, menu_item_to_record)
        save_collection(store, MENU_CATEGORIES_KEY, self._categories, category_to_record)

    @property
    def items(self) -> list[MenuItem]:
        return list(self._items.values())

    @property
    def categories(self) -> list[MenuCategory]:
        return list(self._categories)

    def get_menu_item(self, item_id: str) -> MenuItem | None:
        return self._items.get(item_id)

    def require_menu_item(self, item_id: str) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError("menu item", item_id)
        return item

    def items_in_category(self, slug: str) -> list[MenuItem]:
        return [item for item in self._items.values() if item.category == slug]

    def category_name(self, slug: str) -> str:
        for category in self._categories:
            if category.slug == slug:
                return category.name
        return "Other"

    def default_selections(self, item_id: str) -> dict[str, list[str]]:
        """Required groups start on their first option; optional groups start empty."""
        item = self.require_menu_item(item_id)
        return {
            group.group_id: [group.options[0].option_id] if group.required and group.options else []
            for group in item.modifiers
        }

    def select_modifiers(self, item_id: str, selections: Selections | None = None) -> tuple[SelectedModifier, ...]:
        """Validate selections (group id -> option ids) and snapshot them in menu order."""
        item = self.require_menu_item(item_id)
        selections = selections or {}
        groups_by_id = {group.group_id: group for group in item.modifiers}
        stray = [group_id for group_id in selections if group_id not in groups_by_id]
        if stray:
            raise ValidationError(f"{item.name} has no modifier group {', '.join(stray)}")

        chosen: list[SelectedModifier] = []
        for group in item.modifiers:
            option_ids = list(selections.get(group.group_id, []))
            validate_group_selection(group, option_ids)
            picked = [option for option in group.options if option.option_id in option_ids]
            chosen.append(
                SelectedModifier(
                    name=group.name,
                    options=tuple(SelectedOption(name=option.name, price=option.price) for option in picked),
                )
            )
        return tuple(chosen)

    def draft_item(
        self,
        item_id: str,
        quantity: int = 1,
        selections: Selections | None = None,
        notes: str | None = None,
    ) -> OrderItemDraft:
        """Build an order line with the current name and price captured."""
        item = self.require_menu_item(item_id)
        if not item.available:
            raise ValidationError(f"{item.name} is currently unavailable")
        if quantity < 1:
            raise ValidationError("quantity must be at least 1")
        modifiers = self.select_modifiers(item_id, selections) if item.customizable else ()
        if not item.customizable and selections and any(selections.values()):
            raise ValidationError(f"{item.name} cannot be customized")
        return OrderItemDraft(
            menu_item_id=item.item_id,
            name=item.name,
            price=item.price,
            quantity=quantity,
            modifiers=modifiers,
            notes=notes.strip() if notes and notes.strip() else None,
        )
