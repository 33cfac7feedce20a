"""
view_state.py
Derived table view: search filter, page window, selection, add/update dialog.

ViewState is an immutable snapshot. Every transition returns a new value and
everything shown on screen is recomputed from (customers, ViewState).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

from models import ROWS_PER_PAGE_DEFAULT, ROWS_PER_PAGE_OPTIONS, Customer


@dataclass(frozen=True)
class ViewState:
    query: str = ""
    page: int = 1
    page_size: int = ROWS_PER_PAGE_DEFAULT
    selected_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DataView:
    filtered: list[Customer]
    rows: list[Customer]
    page: int
    page_size: int
    total_pages: int
    start_row_index: int
    selected_ids: frozenset[str]
    single_selected: Customer | None

    @property
    def total_rows(self) -> int:
        return len(self.filtered)

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)

    @property
    def primary_action(self) -> str:
        return "update" if self.single_selected else "create"

    @property
    def all_page_selected(self) -> bool:
        return bool(self.rows) and all(c.id in self.selected_ids for c in self.rows)

    @property
    def range_label(self) -> str:
        if not self.filtered:
            return "0 of 0"
        start = self.start_row_index + 1
        end = min(self.page * self.page_size, self.total_rows)
        return f"{start}-{end} of {self.total_rows}"


# ---------- Pure helpers ----------

def filter_customers(customers: Sequence[Customer], query: str) -> list[Customer]:
    q = query.strip().lower()
    if not q:
        return list(customers)
    return [
        c for c in customers
        if q in c.name.lower() or q in c.description.lower() or q in c.status.lower()
    ]


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(rows: Sequence[Customer], page: int, page_size: int) -> list[Customer]:
    start = (page - 1) * page_size
    return list(rows[start:start + page_size])


def find_customer(customers: Iterable[Customer], customer_id: str) -> Customer | None:
    return next((c for c in customers if c.id == customer_id), None)


# ---------- Transitions ----------

def set_query(state: ViewState, query: str) -> ViewState:
    return replace(state, query=query, page=1)


def set_page(state: ViewState, page: int) -> ViewState:
    return replace(state, page=max(1, int(page)))


def set_page_size(state: ViewState, page_size: int) -> ViewState:
    if page_size not in ROWS_PER_PAGE_OPTIONS:
        raise ValueError(f"Unsupported page size: {page_size}")
    return replace(state, page_size=page_size, page=1)


def toggle_selection(state: ViewState, customer_id: str) -> ViewState:
    return replace(state, selected_ids=state.selected_ids ^ {customer_id})


def toggle_all(state: ViewState, row_ids: Iterable[str]) -> ViewState:
    """
    Select exactly the given rows, or clear the whole selection when every
    one of them is already selected.
    """
    ids = frozenset(row_ids)
    if ids and ids <= state.selected_ids:
        return clear_selection(state)
    return replace(state, selected_ids=ids)


def clear_selection(state: ViewState) -> ViewState:
    return replace(state, selected_ids=frozenset())


def reconcile(state: ViewState, customers: Sequence[Customer]) -> ViewState:
    # Page falls back to 1 once the result set no longer reaches it.
    # Selection is left alone; only a delete clears it.
    count = len(filter_customers(customers, state.query))
    if state.page > total_pages(count, state.page_size):
        return replace(state, page=1)
    return state


def derive(customers: Sequence[Customer], state: ViewState) -> DataView:
    state = reconcile(state, customers)
    filtered = filter_customers(customers, state.query)
    single = None
    if len(state.selected_ids) == 1:
        (only_id,) = state.selected_ids
        single = find_customer(customers, only_id)
    return DataView(
        filtered=filtered,
        rows=paginate(filtered, state.page, state.page_size),
        page=state.page,
        page_size=state.page_size,
        total_pages=total_pages(len(filtered), state.page_size),
        start_row_index=(state.page - 1) * state.page_size,
        selected_ids=state.selected_ids,
        single_selected=single,
    )


# ---------- Add/update dialog ----------

DIALOG_CLOSED = "closed"
DIALOG_CREATE = "create"
DIALOG_UPDATE = "update"

BLANK_FORM = {
    "name": "",
    "description": "",
    "status": "Open",
    "rate": 0.0,
    "balance": 0.0,
    "deposit": 0.0,
}


@dataclass(frozen=True)
class DialogState:
    mode: str = DIALOG_CLOSED
    customer_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self.mode != DIALOG_CLOSED

    @property
    def title(self) -> str:
        return "Update Customer" if self.mode == DIALOG_UPDATE else "Add Customer"


def open_dialog(state: ViewState, customers: Sequence[Customer]) -> DialogState:
    """Update the single selected customer, otherwise add a new one."""
    view = derive(customers, state)
    if view.single_selected is not None:
        return DialogState(DIALOG_UPDATE, view.single_selected.id)
    return DialogState(DIALOG_CREATE)


def close_dialog() -> DialogState:
    return DialogState()


def form_defaults(dialog: DialogState, customers: Sequence[Customer]) -> dict:
    if dialog.mode == DIALOG_UPDATE:
        customer = find_customer(customers, dialog.customer_id)
        if customer is not None:
            return customer.input_fields().to_dict()
    return dict(BLANK_FORM)
