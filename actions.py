"""
actions.py
Run one mutation, re-fetch the collection, reconcile the view state.

Each call is attempted exactly once. Failures come back as a result with
ok=False so the page can offer a retry instead of crashing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import customer_api
from errors import LedgerError
from models import Customer, CustomerInput
from view_state import ViewState, clear_selection, reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    customers: list[Customer]
    state: ViewState
    customer: Customer | None = None
    error: str | None = None


async def load(state: ViewState) -> tuple[list[Customer], ViewState]:
    customers = await customer_api.list_customers()
    return customers, reconcile(state, customers)


async def _refreshed(state: ViewState, ok: bool, customer=None, error=None) -> MutationResult:
    customers, state = await load(state)
    return MutationResult(ok=ok, customers=customers, state=state, customer=customer, error=error)


async def submit_create(state: ViewState, payload: CustomerInput) -> MutationResult:
    try:
        customer = await customer_api.create_customer(payload)
    except LedgerError as exc:
        logger.warning("Create failed: %s", exc)
        return await _refreshed(state, False, error=str(exc))
    return await _refreshed(state, True, customer=customer)


async def submit_update(state: ViewState, customer_id: str, payload: Mapping) -> MutationResult:
    try:
        customer = await customer_api.update_customer(customer_id, payload)
    except LedgerError as exc:
        logger.warning("Update of %s failed: %s", customer_id, exc)
        return await _refreshed(state, False, error=str(exc))
    return await _refreshed(state, True, customer=customer)


async def submit_delete(state: ViewState) -> MutationResult:
    if not state.selected_ids:
        return await _refreshed(state, True)
    try:
        await customer_api.delete_customers(sorted(state.selected_ids))
    except LedgerError as exc:
        logger.warning("Delete failed: %s", exc)
        return await _refreshed(state, False, error=str(exc))
    return await _refreshed(clear_selection(state), True)
