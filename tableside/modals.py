"""Modal screens: modifier selection, payment and feedback."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from tableside.errors import ValidationError
from tableside.menu import MenuCatalog, validate_group_selection
from tableside.models import MenuItem, Order
from tableside.rendering import format_money

_MODAL_CSS = """
{name} {{
    align: center middle;
    background: $background 60%;
}}

.dialog {{
    width: 64;
    height: auto;
    border: round $secondary;
    background: $panel;
    padding: 1 2;
}}

.dialog-title {{
    text-style: bold;
    margin-bottom: 1;
    color: white;
}}

.dialog-body {{
    margin-bottom: 1;
    color: white;
}}

.dialog-error {{
    color: #ffb3b3;
}}

.dialog-help {{
    margin-top: 1;
    color: #dddddd;
}}
"""


@dataclass(frozen=True)
class ModifierChoice:
    """Result of the modifier modal."""

    quantity: int
    selections: dict[str, list[str]]


class ModifierModal(ModalScreen[ModifierChoice | None]):
    """Centered modal to pick modifier options and quantity for one menu item."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("plus", "change_quantity(1)", "More"),
        ("minus", "change_quantity(-1)", "Less"),
        ("a", "confirm", "Add to cart"),
    ]

    CSS = _MODAL_CSS.format(name="ModifierModal")

    cursor_index = reactive(0)

    def __init__(self, item: MenuItem, catalog: MenuCatalog) -> None:
        super().__init__()
        self.item = item
        self.quantity = 1
        self.selections = catalog.default_selections(item.item_id)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static(self.item.name, classes="dialog-title")
            yield Static(id="modifier-body", classes="dialog-body")
            yield Static(id="modifier-error", classes="dialog-error")
            yield Static(
                "J/K/↑/↓ move, Enter toggle, +/- quantity, A add, Esc cancel",
                classes="dialog-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def _rows(self) -> list[tuple[str, str]]:
        return [(group.group_id, option.option_id) for group in self.item.modifiers for option in group.options]

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        rows = self._rows()
        if not rows:
            return
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_change_quantity(self, delta: int) -> None:
        self.quantity = max(1, self.quantity + delta)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        rows = self._rows()
        if not rows:
            return
        group_id, option_id = rows[self.cursor_index]
        group = next(group for group in self.item.modifiers if group.group_id == group_id)
        chosen = self.selections.setdefault(group_id, [])
        if group.multi_select:
            if option_id in chosen:
                chosen.remove(option_id)
            else:
                chosen.append(option_id)
        elif chosen == [option_id] and not group.required:
            chosen.clear()
        else:
            self.selections[group_id] = [option_id]
        self.error = ""
        self._refresh_content()

    def action_confirm(self) -> None:
        try:
            for group in self.item.modifiers:
                validate_group_selection(group, self.selections.get(group.group_id, []))
        except ValidationError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(ModifierChoice(quantity=self.quantity, selections=self.selections))

    def _refresh_content(self) -> None:
        body = self.query_one("#modifier-body", Static)
        error = self.query_one("#modifier-error", Static)

        content = Text(style="white")
        content.append(f"{format_money(self.item.price)}  Quantity: {self.quantity}\n")
        row_index = 0
        for group in self.item.modifiers:
            label = "required" if group.required else "optional"
            kind = "any" if group.multi_select else "one"
            content.append(f"\n{group.name} ({label}, choose {kind})\n", style="bold")
            chosen = self.selections.get(group.group_id, [])
            for option in group.options:
                pointer = "➤ " if row_index == self.cursor_index else "  "
                checked = "[x]" if option.option_id in chosen else "[ ]"
                delta = f" {'+' if option.price >= 0 else '-'}{format_money(abs(option.price))}" if option.price else ""
                style = "bold white" if option.option_id in chosen else "white"
                content.append(f"{pointer}{checked} {option.name}{delta}\n", style=style)
                row_index += 1
        body.update(content)
        error.update(self.error)


@dataclass(frozen=True)
class PaymentChoice:
    amount: float
    split_bill: bool


class PaymentModal(ModalScreen[PaymentChoice | None]):
    """Confirm payment of an order, optionally splitting the bill."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("s", "toggle_split", "Split bill"),
        ("plus", "change_split(1)", "More payers"),
        ("minus", "change_split(-1)", "Fewer payers"),
        ("enter", "pay", "Pay"),
    ]

    CSS = _MODAL_CSS.format(name="PaymentModal")

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order
        self.split_bill = False
        self.split_count = 2

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static(f"Pay Table {self.order.table_number}", classes="dialog-title")
            yield Static(id="payment-body", classes="dialog-body")
            yield Static("S split bill, +/- payers, Enter pay, Esc cancel", classes="dialog-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_toggle_split(self) -> None:
        self.split_bill = not self.split_bill
        self._refresh_content()

    def action_change_split(self, delta: int) -> None:
        if not self.split_bill:
            return
        self.split_count = max(2, self.split_count + delta)
        self._refresh_content()

    def action_pay(self) -> None:
        self.dismiss(PaymentChoice(amount=self.order.total_amount, split_bill=self.split_bill))

    def _refresh_content(self) -> None:
        content = Text(style="white")
        for item in self.order.items[:3]:
            content.append(f"{item.quantity}x {item.name}  {format_money(item.line_total)}\n")
        if len(self.order.items) > 3:
            content.append(f"+{len(self.order.items) - 3} more items\n", style="dim")
        content.append(f"\nTotal: {format_money(self.order.total_amount)}\n", style="bold")
        if self.split_bill:
            share = self.order.total_amount / self.split_count
            content.append(f"Split {self.split_count} ways: {format_money(share)} each\n")
        self.query_one("#payment-body", Static).update(content)


@dataclass(frozen=True)
class FeedbackChoice:
    rating: int
    comment: str | None


class FeedbackModal(ModalScreen[FeedbackChoice | None]):
    """Prompt for a 1-5 rating and an optional comment."""

    CSS = _MODAL_CSS.format(name="FeedbackModal")

    def __init__(self) -> None:
        super().__init__()
        self.rating: int | None = None
        self.comment = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("How was your meal?", classes="dialog-title")
            yield Static(id="feedback-body", classes="dialog-body")
            yield Static(id="feedback-error", classes="dialog-error")
            yield Static(
                "Digits 1-5 rate. Type to comment. Enter submit. Backspace delete. Esc cancel.",
                classes="dialog-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.comment:
                self.comment = self.comment[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if event.character.isdigit() and not self.comment:
                self.rating = int(event.character)
                self.error = ""
            else:
                self.comment += event.character
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if self.rating is None:
            self.error = "Rating is required."
            self._refresh_content()
            return
        if not (1 <= self.rating <= 5):
            self.error = "Rating must be between 1 and 5."
            self._refresh_content()
            return
        self.dismiss(FeedbackChoice(rating=self.rating, comment=self.comment.strip() or None))

    def _refresh_content(self) -> None:
        stars = "★" * (self.rating or 0) + "☆" * (5 - min(5, self.rating or 0))
        body = Text(style="white")
        body.append(f"{stars}  ({self.rating if self.rating is not None else '-'}/5)\n", style="bold")
        body.append(f"Comment: {self.comment}|")
        self.query_one("#feedback-body", Static).update(body)
        self.query_one("#feedback-error", Static).update(self.error)
