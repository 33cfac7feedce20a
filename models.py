"""
models.py
Lightweight domain helpers (statuses, page sizes, dataclasses).
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, fields

STATUS_OPTIONS = ("Open", "Inactive", "Paid", "Due")

ROWS_PER_PAGE_OPTIONS = (5, 10, 15, 20, 30, 40, 50)
ROWS_PER_PAGE_DEFAULT = 10

AMOUNT_FIELDS = ("rate", "balance", "deposit")


@dataclass(frozen=True)
class CustomerInput:
    name: str
    description: str
    status: str  # one of STATUS_OPTIONS
    rate: float
    balance: float
    deposit: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    description: str
    status: str
    rate: float
    balance: float
    deposit: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data["description"]),
            status=str(data["status"]),
            rate=float(data["rate"]),
            balance=float(data["balance"]),
            deposit=float(data["deposit"]),
        )

    def input_fields(self) -> CustomerInput:
        return CustomerInput(
            name=self.name,
            description=self.description,
            status=self.status,
            rate=self.rate,
            balance=self.balance,
            deposit=self.deposit,
        )


CUSTOMER_FIELDS = tuple(f.name for f in fields(Customer))
INPUT_FIELDS = tuple(f.name for f in fields(CustomerInput))
