"""Application service: Show Order use case (query)."""

from __future__ import annotations

from kitstock.application._mapping import order_to_dto
from kitstock.application.dto import OrderDTO
from kitstock.domain.exceptions import EntityNotFoundError
from kitstock.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)
