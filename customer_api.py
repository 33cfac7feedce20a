"""
customer_api.py
Async customer store on top of a single JSON storage slot.

Every call sleeps first to simulate network latency. Calls are not safe to
interleave against the same slot; the app drives them one at a time.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import replace

import db
from config import load_settings
from errors import NotFoundError, StorageDecodeError
from models import Customer, CustomerInput, INPUT_FIELDS

logger = logging.getLogger(__name__)

_settings = load_settings()
STORAGE_KEY = _settings.storage_key
FETCH_DELAY_MS = _settings.fetch_delay_ms
MUTATE_DELAY_MS = _settings.mutate_delay_ms


async def _delay(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


def _decode(raw: str) -> list[Customer]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageDecodeError(f"slot {STORAGE_KEY!r} is not valid JSON") from exc
    if not isinstance(data, list):
        raise StorageDecodeError(f"slot {STORAGE_KEY!r} does not hold a list")
    try:
        return [Customer.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageDecodeError(f"slot {STORAGE_KEY!r} holds a malformed record") from exc


def _get_stored() -> list[Customer]:
    raw = db.get_slot(STORAGE_KEY)
    if not raw:
        return []
    try:
        return _decode(raw)
    except StorageDecodeError as exc:
        logger.warning("Ignoring stored customers: %s", exc)
        return []


def _set_stored(customers: list[Customer]) -> None:
    db.set_slot(STORAGE_KEY, json.dumps([c.to_dict() for c in customers]))


async def list_customers() -> list[Customer]:
    await _delay(FETCH_DELAY_MS)
    return _get_stored()


async def create_customer(payload: CustomerInput) -> Customer:
    await _delay(MUTATE_DELAY_MS)
    customers = _get_stored()
    taken = {c.id for c in customers}
    new_id = str(uuid.uuid4())
    while new_id in taken:
        new_id = str(uuid.uuid4())
    customer = Customer(id=new_id, **payload.to_dict())
    _set_stored([*customers, customer])
    logger.info("Created customer %s (%s)", customer.id, customer.name)
    return customer


async def update_customer(customer_id: str, payload: Mapping) -> Customer:
    """
    Overwrite the given fields of an existing customer. `id` never changes;
    unknown keys (including `id`) are ignored.
    """
    await _delay(MUTATE_DELAY_MS)
    customers = _get_stored()
    index = next((i for i, c in enumerate(customers) if c.id == customer_id), None)
    if index is None:
        raise NotFoundError(customer_id)
    changes = {k: v for k, v in payload.items() if k in INPUT_FIELDS}
    customer = replace(customers[index], **changes)
    updated = list(customers)
    updated[index] = customer
    _set_stored(updated)
    logger.info("Updated customer %s", customer_id)
    return customer


async def delete_customers(ids: Iterable[str]) -> None:
    await _delay(MUTATE_DELAY_MS)
    doomed = set(ids)
    customers = _get_stored()
    kept = [c for c in customers if c.id not in doomed]
    if len(kept) == len(customers):
        return
    _set_stored(kept)
    logger.info("Deleted %d customer(s)", len(customers) - len(kept))


async def clear_customers() -> None:
    await _delay(MUTATE_DELAY_MS)
    db.clear_slot(STORAGE_KEY)
    logger.info("Cleared all customers")
