from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from app.dependencies import get_uow
from app.schemas import CreatedResponse, OrderResponse, OrderStatusResponse
from app.utils import error_boundary, parse_id
from application.use_cases import (
    ChangeOrderStatusUseCase,
    CreateOrderUseCase,
    DeleteOrderUseCase,
    ListOrdersUseCase,
    ShowOrderUseCase,
    UpdateOrderUseCase,
)
from domain.order import OrderStatus

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/status", response_model=List[str])
async def list_order_status() -> List[str]:
    return [s.value for s in OrderStatus]


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(payload: Any = Body(default=None), uow=Depends(get_uow)) -> OrderResponse:
    """Validate, price and store a new order."""
    with error_boundary("Unexpected error on create order"):
        order = await CreateOrderUseCase(uow).execute(payload)
    return OrderResponse.model_validate(order)


@router.put("/{order_id}", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def update_order(order_id: str, payload: Any = Body(default=None), uow=Depends(get_uow)) -> OrderResponse:
    """Replace an order and all of its items with a repriced submission."""
    with error_boundary("Unexpected error on update order"):
        order = await UpdateOrderUseCase(uow).execute(parse_id(order_id, "order"), payload)
    return OrderResponse.model_validate(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def show_order(order_id: str, uow=Depends(get_uow)) -> OrderResponse:
    with error_boundary("Unexpected error on show order"):
        order = await ShowOrderUseCase(uow).execute(parse_id(order_id, "order"))
    return OrderResponse.model_validate(order)


@router.get("", response_model=List[OrderResponse])
async def list_orders(uow=Depends(get_uow)) -> List[OrderResponse]:
    with error_boundary("Unexpected error on list orders"):
        orders = await ListOrdersUseCase(uow).execute()
    return [OrderResponse.model_validate(order) for order in orders]


@router.delete("/{order_id}", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def delete_order(order_id: str, uow=Depends(get_uow)) -> CreatedResponse:
    with error_boundary("Unexpected error on delete order"):
        entity_id = parse_id(order_id, "order")
        await DeleteOrderUseCase(uow).execute(entity_id)
    return CreatedResponse(id=entity_id)


@router.put("/{order_id}/finish", response_model=OrderStatusResponse, status_code=status.HTTP_201_CREATED)
async def finish_order(order_id: str, uow=Depends(get_uow)) -> OrderStatusResponse:
    with error_boundary("Unexpected error on finish order"):
        order = await ChangeOrderStatusUseCase(uow).execute(parse_id(order_id, "order"), OrderStatus.FINISHED)
    return OrderStatusResponse(id=order.id, status=order.status)


@router.put("/{order_id}/cancel", response_model=OrderStatusResponse, status_code=status.HTTP_201_CREATED)
async def cancel_order(order_id: str, uow=Depends(get_uow)) -> OrderStatusResponse:
    with error_boundary("Unexpected error on cancel order"):
        order = await ChangeOrderStatusUseCase(uow).execute(parse_id(order_id, "order"), OrderStatus.CANCELED)
    return OrderStatusResponse(id=order.id, status=order.status)
