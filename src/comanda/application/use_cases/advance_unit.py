from __future__ import annotations

import logging
from datetime import datetime, timezone

from comanda.application.dto.requests import AdvanceUnitRequest
from comanda.application.dto.responses import OrderResponse
from comanda.application.ports.repositories import OrderRepository
from comanda.application.use_cases.get_order import OrderEnricher, OrderNotFoundError
from comanda.application.use_cases.update_order import InvalidOrderTransitionError
from comanda.domain.common.ids import CompanyId, OrderId, ProductId
from comanda.domain.order.entities import OrderTransitionError
from comanda.domain.order.ledger import InvalidUnitTransitionError, UnitNotFoundError
from comanda.domain.order.lifecycle import LineNotFoundError, advance_line_unit

logger = logging.getLogger(__name__)


class OrderUnitNotFoundError(Exception):
    pass


class UnitTransitionRejectedError(Exception):
    pass


class AdvanceUnitStatus:
    """Kitchen-side move of one unit along pending -> served."""

    def __init__(self, order_repository: OrderRepository, enricher: OrderEnricher) -> None:
        self._order_repository = order_repository
        self._enricher = enricher

    def execute(
        self,
        company_id: CompanyId,
        order_id: OrderId,
        product_id: ProductId,
        position: int,
        request_dto: AdvanceUnitRequest,
    ) -> OrderResponse:
        order = self._order_repository.get(order_id=order_id, company_id=company_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        try:
            updated = advance_line_unit(
                order,
                product_id=product_id,
                position=position,
                new_status=request_dto.status,
                now=datetime.now(timezone.utc),
            )
        except (LineNotFoundError, UnitNotFoundError) as exc:
            raise OrderUnitNotFoundError(str(exc)) from exc
        except InvalidUnitTransitionError as exc:
            raise UnitTransitionRejectedError(str(exc)) from exc
        except OrderTransitionError as exc:
            raise InvalidOrderTransitionError(str(exc)) from exc

        self._order_repository.update(updated)
        logger.info(
            "order_unit_advanced",
            extra={
                "order_id": str(order_id),
                "product_id": str(product_id),
                "position": position,
                "unit_status": request_dto.status.value,
            },
        )
        return self._enricher.to_response(updated)
