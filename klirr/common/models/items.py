"""Invoice line items, before and after currency conversion."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Union

from klirr.common.errors import InvalidExpenseItem, KlirrError
from klirr.common.models.calendar import parse_date
from klirr.common.models.money import (
    Currency,
    ExchangeRates,
    decimal_to_f64,
    format_decimal,
    non_negative_decimal,
    to_decimal,
)


@dataclass(frozen=True)
class Item:
    """A billable thing priced in its own currency."""

    name: str
    unit_price: Decimal
    currency: Currency
    quantity: Decimal
    transaction_date: date

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        object.__setattr__(self, "quantity", non_negative_decimal(self.quantity))

    @property
    def merge_key(self) -> tuple:
        return (self.name, self.transaction_date, self.unit_price, self.currency)

    def with_quantity(self, quantity: Decimal) -> "Item":
        return Item(self.name, self.unit_price, self.currency, quantity, self.transaction_date)

    def total_cost_in_target_currency(self, rates: ExchangeRates) -> "ItemConvertedIntoTargetCurrency":
        unit_price = rates.convert(self.unit_price, self.currency)
        converted = Item(
            name=self.name,
            unit_price=unit_price,
            currency=rates.target_currency,
            quantity=self.quantity,
            transaction_date=self.transaction_date,
        )
        return ItemConvertedIntoTargetCurrency(item=converted, total_cost=unit_price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "transaction_date": self.transaction_date.isoformat(),
            "quantity": format_decimal(self.quantity),
            "unit_price": format_decimal(self.unit_price),
            "currency": str(self.currency),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        try:
            return cls(
                name=str(data["name"]),
                unit_price=to_decimal(data["unit_price"]),
                currency=Currency.parse(data["currency"]),
                quantity=data["quantity"],
                transaction_date=parse_date(data["transaction_date"]),
            )
        except (KeyError, TypeError) as e:
            raise InvalidExpenseItem(data, f"missing field {e}") from None


def parse_expense_item(text: str) -> Item:
    """Parse ``name,unit_price,CURRENCY,quantity,YYYY-MM-DD``."""
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 5:
        raise InvalidExpenseItem(
            text, f"expected 5 comma separated fields, found {len(parts)}"
        )
    name, unit_price, currency, quantity, transaction_date = parts
    if not name:
        raise InvalidExpenseItem(text, "name must not be empty")
    try:
        return Item(
            name=name,
            unit_price=to_decimal(unit_price),
            currency=Currency.parse(currency),
            quantity=quantity,
            transaction_date=parse_date(transaction_date),
        )
    except InvalidExpenseItem:
        raise
    except KlirrError as e:
        raise InvalidExpenseItem(text, str(e)) from e


@dataclass(frozen=True)
class ItemConvertedIntoTargetCurrency:
    item: Item
    total_cost: Decimal

    def to_typst_dict(self) -> dict:
        return {
            "name": self.item.name,
            "transaction_date": self.item.transaction_date.isoformat(),
            "quantity": decimal_to_f64(self.item.quantity),
            "unit_price": decimal_to_f64(self.item.unit_price),
            "currency": str(self.item.currency),
            "total_cost": decimal_to_f64(self.total_cost),
        }


@dataclass(frozen=True)
class LineItemsFlat:
    is_expenses: bool
    items: List[ItemConvertedIntoTargetCurrency] = field(default_factory=list)

    @property
    def grand_total(self) -> Decimal:
        return sum((i.total_cost for i in self.items), Decimal(0))

    def to_typst_dict(self) -> dict:
        return {
            "is_expenses": self.is_expenses,
            "items": [item.to_typst_dict() for item in self.items],
        }


@dataclass(frozen=True)
class ServiceItems:
    """A services invoice has exactly one line item."""

    item: Item

    is_expenses = False

    @property
    def items(self) -> List[Item]:
        return [self.item]


@dataclass(frozen=True)
class ExpenseItems:
    items: List[Item]

    is_expenses = True


InvoicedItems = Union[ServiceItems, ExpenseItems]


def convert_line_items(items: InvoicedItems, rates: ExchangeRates) -> LineItemsFlat:
    return LineItemsFlat(
        is_expenses=items.is_expenses,
        items=[item.total_cost_in_target_currency(rates) for item in items.items],
    )
