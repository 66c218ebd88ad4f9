"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. The storage backend is
chosen by ``KITSTOCK_STORAGE_BACKEND`` (``json`` or ``sql``).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from kitstock.config import AppConfig, get_config
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.order_repository import OrderRepository
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.repository.set_repository import SetRepository


@dataclass(frozen=True)
class Repositories:
    parts: PartRepository
    sets: SetRepository
    orders: OrderRepository
    ledger: InventoryLedger


def build_repositories(config: AppConfig) -> Repositories:
    if config.storage_backend == "sql":
        return _sql_repositories(config)
    return _json_repositories(config)


def _json_repositories(config: AppConfig) -> Repositories:
    from kitstock.infrastructure.persistence.json_inventory_ledger import (
        JsonInventoryLedger,
    )
    from kitstock.infrastructure.persistence.json_order_repository import (
        JsonOrderRepository,
    )
    from kitstock.infrastructure.persistence.json_part_repository import (
        JsonPartRepository,
    )
    from kitstock.infrastructure.persistence.json_set_repository import (
        JsonSetRepository,
    )

    data_dir = config.data_dir
    return Repositories(
        parts=JsonPartRepository(data_dir / "parts.json"),
        sets=JsonSetRepository(data_dir / "sets.json"),
        orders=JsonOrderRepository(data_dir / "orders.json"),
        ledger=JsonInventoryLedger(
            data_dir / "parts.json", data_dir / "inventory_transactions.json"
        ),
    )


def _sql_repositories(config: AppConfig) -> Repositories:
    from kitstock.infrastructure.persistence.sql.database import Database
    from kitstock.infrastructure.persistence.sql.repositories import (
        SqlInventoryLedger,
        SqlOrderRepository,
        SqlPartRepository,
        SqlSetRepository,
    )

    db = Database(config.database_url)
    db.create_tables()
    return Repositories(
        parts=SqlPartRepository(db),
        sets=SqlSetRepository(db),
        orders=SqlOrderRepository(db),
        ledger=SqlInventoryLedger(db, retries=config.stock_update_retries),
    )


@lru_cache(maxsize=1)
def _repositories() -> Repositories:
    return build_repositories(get_config())


def reset() -> None:
    _repositories.cache_clear()


def part_repository() -> PartRepository:
    return _repositories().parts


def set_repository() -> SetRepository:
    return _repositories().sets


def order_repository() -> OrderRepository:
    return _repositories().orders


def inventory_ledger() -> InventoryLedger:
    return _repositories().ledger
