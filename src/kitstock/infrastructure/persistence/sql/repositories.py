"""SQLAlchemy implementations of the domain repositories and the ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from kitstock.domain.exceptions import (
    ConcurrentStockUpdateError,
    EntityNotFoundError,
    ValidationError,
)
from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.model.ledger import (
    InventoryTransaction,
    ReferenceType,
    TransactionType,
    movement_to_level,
)
from kitstock.domain.model.order import Order, OrderLineItem, OrderStatus
from kitstock.domain.model.part import Part
from kitstock.domain.model.value_objects import Money, Quantity
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.order_repository import OrderRepository
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.infrastructure.persistence.sql.database import Database
from kitstock.infrastructure.persistence.sql.models import (
    InventoryTransactionRow,
    OrderItemRow,
    OrderRow,
    PartRow,
    SetPartRow,
    SetRow,
)
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _next_id(session: Session, column) -> int:
    return (session.scalar(select(func.max(column))) or 0) + 1


# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------


class SqlPartRepository(PartRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    def next_id(self) -> int:
        with self._db.session_scope() as session:
            return _next_id(session, PartRow.part_id)

    def get_by_id(self, part_id: int) -> Part | None:
        with self._db.session_scope() as session:
            row = session.get(PartRow, part_id)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Part]:
        with self._db.session_scope() as session:
            rows = session.scalars(select(PartRow).order_by(PartRow.part_id))
            return [self._to_domain(row) for row in rows]

    def add(self, part: Part) -> None:
        with self._db.session_scope() as session:
            if session.get(PartRow, part.part_id) is not None:
                raise ValidationError(f"Part #{part.part_id} already exists")
            session.add(
                PartRow(
                    part_id=part.part_id,
                    part_number=part.part_number,
                    name=part.name,
                    stock_quantity=part.stock_quantity,
                    minimum_stock_level=part.minimum_stock_level,
                    baseline_quantity=part.baseline_quantity,
                )
            )

    @staticmethod
    def _to_domain(row: PartRow) -> Part:
        return Part(
            part_id=row.part_id,
            name=row.name,
            part_number=row.part_number,
            stock_quantity=row.stock_quantity,
            minimum_stock_level=row.minimum_stock_level,
            baseline_quantity=row.baseline_quantity,
        )


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


class SqlSetRepository(SetRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    def next_id(self) -> int:
        with self._db.session_scope() as session:
            return _next_id(session, SetRow.set_id)

    def get_by_id(self, set_id: int) -> KitSet | None:
        with self._db.session_scope() as session:
            row = session.get(SetRow, set_id)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[KitSet]:
        with self._db.session_scope() as session:
            rows = session.scalars(select(SetRow).order_by(SetRow.set_id))
            return [self._to_domain(row) for row in rows]

    def save(self, kit_set: KitSet) -> None:
        with self._db.session_scope() as session:
            row = session.get(SetRow, kit_set.set_id)
            if row is None:
                row = SetRow(set_id=kit_set.set_id)
                session.add(row)
            row.name = kit_set.name
            row.parts.clear()
            session.flush()
            row.parts.extend(
                SetPartRow(
                    part_id=entry.part_id,
                    quantity=entry.quantity,
                    is_optional=entry.is_optional,
                )
                for entry in kit_set.bom
            )

    @staticmethod
    def _to_domain(row: SetRow) -> KitSet:
        return KitSet(
            set_id=row.set_id,
            name=row.name,
            bom=[
                BomEntry(part_id=p.part_id, quantity=p.quantity, is_optional=p.is_optional)
                for p in row.parts
            ],
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class SqlOrderRepository(OrderRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    def next_id(self) -> int:
        with self._db.session_scope() as session:
            return _next_id(session, OrderRow.order_id)

    def get_by_id(self, order_id: int) -> Order | None:
        with self._db.session_scope() as session:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None

    def save(self, order: Order) -> None:
        with self._db.session_scope() as session:
            row = session.get(OrderRow, order.id) if order.id is not None else None
            if row is None:
                row = OrderRow(
                    order_number=order.order_number,
                    customer_name=order.customer_name,
                    customer_email=order.customer_email,
                    shipping_address=order.shipping_address,
                    currency=order.total.currency,
                    total_amount=order.total.amount,
                    created_at=order.created_at,
                    items=[
                        OrderItemRow(
                            set_id=item.set_id,
                            quantity=item.quantity.value,
                            unit_price=item.unit_price.amount,
                            line_total=item.line_total.amount,
                        )
                        for item in order.items
                    ],
                )
                session.add(row)
            # Line items are immutable; only status fields change after creation.
            row.status = order.status.value
            row.notes = order.notes
            row.updated_at = order.updated_at
            session.flush()
            order.id = row.order_id

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.order_id,
            order_number=row.order_number,
            customer_name=row.customer_name,
            customer_email=row.customer_email,
            shipping_address=row.shipping_address,
            items=[
                OrderLineItem(
                    set_id=item.set_id,
                    quantity=Quantity(item.quantity),
                    unit_price=Money(item.unit_price, row.currency),
                )
                for item in row.items
            ],
            status=OrderStatus(row.status),
            notes=row.notes,
            created_at=_aware(row.created_at),  # type: ignore[arg-type]
            updated_at=_aware(row.updated_at),
        )


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class SqlInventoryLedger(InventoryLedger):
    """Each movement is one transaction: lock the part row, compare-and-swap
    the stock value, insert the ledger row, commit.

    The CAS ``UPDATE ... WHERE stock_quantity = <value read>`` guards
    backends where ``FOR UPDATE`` is a no-op (SQLite); a lost race is
    retried with a fresh read.
    """

    def __init__(self, db: Database, retries: int = 3) -> None:
        self._db = db
        self._retries = max(1, retries)

    def apply_movement(
        self,
        part_id: int,
        transaction_type: TransactionType,
        quantity: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
        clamp: bool = True,
    ) -> InventoryTransaction | None:
        if quantity <= 0:
            raise ValidationError("Movement quantity must be positive")
        return self._apply(
            part_id,
            lambda current: (transaction_type, quantity),
            reason, reference_id, reference_type, clamp,
        )

    def set_stock_level(
        self,
        part_id: int,
        target: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
    ) -> InventoryTransaction | None:
        if target < 0:
            raise ValidationError("Stock level cannot be negative")
        return self._apply(
            part_id,
            lambda current: movement_to_level(current, target),
            reason, reference_id, reference_type, False,
        )

    def _apply(
        self,
        part_id: int,
        plan: Callable[[int], tuple[TransactionType, int] | None],
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
        clamp: bool,
    ) -> InventoryTransaction | None:
        """Run one movement; *plan* maps the locked stock value to (direction, units)."""
        for attempt in range(1, self._retries + 1):
            with self._db.session_scope() as session:
                row = session.scalars(
                    select(PartRow).where(PartRow.part_id == part_id).with_for_update()
                ).one_or_none()
                if row is None:
                    raise EntityNotFoundError(f"Part #{part_id} not found")

                part = SqlPartRepository._to_domain(row)
                previous = part.stock_quantity
                step = plan(previous)
                if step is None:
                    return None
                transaction_type, quantity = step
                if transaction_type is TransactionType.OUT:
                    moved = part.withdraw(quantity, clamp=clamp)
                else:
                    part.restock(quantity)
                    moved = quantity
                if moved == 0:
                    return None

                result = session.execute(
                    update(PartRow)
                    .where(PartRow.part_id == part_id, PartRow.stock_quantity == previous)
                    .values(stock_quantity=part.stock_quantity)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    logger.debug(
                        "Stock for part {} changed during update (attempt {}/{})",
                        part_id, attempt, self._retries,
                    )
                    session.rollback()
                    continue

                txn_row = InventoryTransactionRow(
                    part_id=part_id,
                    transaction_type=transaction_type.value,
                    quantity=moved,
                    previous_stock=previous,
                    new_stock=part.stock_quantity,
                    reason=reason,
                    reference_id=reference_id,
                    reference_type=reference_type.value,
                )
                session.add(txn_row)
                session.flush()
                return self._to_domain(txn_row)

        raise ConcurrentStockUpdateError(
            f"Stock for part #{part_id} kept changing; gave up after {self._retries} attempts"
        )

    def list_for_part(self, part_id: int) -> list[InventoryTransaction]:
        with self._db.session_scope() as session:
            rows = session.scalars(
                select(InventoryTransactionRow)
                .where(InventoryTransactionRow.part_id == part_id)
                .order_by(InventoryTransactionRow.transaction_id)
            )
            return [self._to_domain(row) for row in rows]

    def list_for_reference(
        self, reference_id: int, reference_type: ReferenceType
    ) -> list[InventoryTransaction]:
        with self._db.session_scope() as session:
            rows = session.scalars(
                select(InventoryTransactionRow)
                .where(
                    InventoryTransactionRow.reference_id == reference_id,
                    InventoryTransactionRow.reference_type == reference_type.value,
                )
                .order_by(InventoryTransactionRow.transaction_id)
            )
            return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_domain(row: InventoryTransactionRow) -> InventoryTransaction:
        return InventoryTransaction(
            transaction_id=row.transaction_id,
            part_id=row.part_id,
            transaction_type=TransactionType(row.transaction_type),
            quantity=row.quantity,
            reason=row.reason,
            reference_id=row.reference_id,
            reference_type=ReferenceType(row.reference_type),
            previous_stock=row.previous_stock,
            new_stock=row.new_stock,
            created_at=_aware(row.created_at),  # type: ignore[arg-type]
        )
