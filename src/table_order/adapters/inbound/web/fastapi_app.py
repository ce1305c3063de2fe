from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Sequence

from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from table_order.core.domain.model.errors import (
    CartNotFound,
    MenuItemNotFound,
    OrderError,
    OrderNotFound,
    PersistenceError,
    PublishError,
    ValidationError,
)
from table_order.core.domain.model.line_items import OrderLine
from table_order.core.domain.model.menu import MenuItem
from table_order.core.domain.model.order import TABLE_NUMBERS, Order
from table_order.core.ports.inbound.browse_menu import BrowseMenuUseCase
from table_order.core.ports.inbound.cart import CartItemCommand, CartUseCase, CartView
from table_order.core.ports.inbound.order_board import (
    BoardQuery,
    BoardView,
    OrderBoardUseCase,
    OrderCard,
)
from table_order.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from table_order.core.ports.inbound.set_status import SetStatusCommand, SetStatusUseCase

ORDER_SUBMITTED = "Order submitted successfully!"

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class MenuItemOut(BaseModel):
    id: str
    category: str
    name: str
    size: str | None
    price: str
    currency: str
    temperature: str | None


class MenuSectionOut(BaseModel):
    category: str
    count: int
    items: list[MenuItemOut]


class MenuResponse(BaseModel):
    sections: list[MenuSectionOut]


class TablesResponse(BaseModel):
    tables: list[int]


class CartItemIn(BaseModel):
    item_id: str = Field(min_length=1, examples=["water-500-cold"])
    # omitted: the menu item's own temperature is used
    temperature: str | None = Field(None, examples=["cold"])


class CartLineOut(BaseModel):
    item_id: str
    name: str
    size: str | None
    temperature: str | None
    unit_price: str
    quantity: int
    subtotal: str


class CartResponse(BaseModel):
    cart_id: str
    lines: list[CartLineOut]
    item_count: int
    total: str
    currency: str


class PlaceOrderRequest(BaseModel):
    # required-ness is checked by the use case so the message stays uniform
    customer_name: str = Field("", examples=["Asha"])
    table_number: int | None = Field(None, examples=[4])
    message: str | None = Field(None, examples=["less spicy please"])


class OrderReceiptResponse(BaseModel):
    order_id: str
    customer_name: str
    table_number: int
    total: str
    currency: str
    status: str
    message: str = ORDER_SUBMITTED


class OrderLineOut(BaseModel):
    item_id: str
    name: str
    size: str | None
    temperature: str | None
    unit_price: str
    quantity: int
    subtotal: str


class OrderOut(BaseModel):
    order_id: str
    customer_name: str
    table_number: int
    message: str | None
    total_amount: str
    currency: str
    status: str
    bucket: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderLineOut]
    preview: list[OrderLineOut]
    more_items: int


class OrderListResponse(BaseModel):
    count: int
    orders: list[OrderOut]


class StatusBucketsResponse(BaseModel):
    pending: OrderListResponse
    in_progress: OrderListResponse
    complete: OrderListResponse


class TableGroupOut(BaseModel):
    table_number: int
    count: int
    orders: list[OrderOut]


class TableGroupsResponse(BaseModel):
    tables: list[TableGroupOut]


class SetStatusRequest(BaseModel):
    status: str = Field(examples=["inprogress"])


class StatusUpdateResponse(BaseModel):
    order: OrderOut
    message: str


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


# ---- Mapping helpers -------------------------------------------------------


def _map_error_to_http(err: OrderError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, (OrderNotFound, MenuItemNotFound, CartNotFound)):
        return 404, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PublishError):
        return 503, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PersistenceError):
        return 500, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


def _menu_item_out(item: MenuItem) -> MenuItemOut:
    return MenuItemOut(
        id=item.item_id.value,
        category=item.category.value,
        name=item.name,
        size=item.size,
        price=str(item.price.amount),
        currency=item.price.currency,
        temperature=item.temperature,
    )


def _cart_out(view: CartView) -> CartResponse:
    return CartResponse(
        cart_id=view.cart_id,
        lines=[
            CartLineOut(
                item_id=ln.item_id,
                name=ln.name,
                size=ln.size,
                temperature=ln.variant,
                unit_price=str(ln.unit_price.amount),
                quantity=ln.quantity,
                subtotal=str(ln.subtotal.amount),
            )
            for ln in view.lines
        ],
        item_count=view.item_count,
        total=str(view.total.amount),
        currency=view.total.currency,
    )


def _line_out(line: OrderLine) -> OrderLineOut:
    return OrderLineOut(
        item_id=line.item_id,
        name=line.name,
        size=line.size,
        temperature=line.temperature,
        unit_price=str(line.unit_price.amount),
        quantity=line.quantity,
        subtotal=str(line.subtotal().amount),
    )


def _order_out(order: Order, card: OrderCard | None = None) -> OrderOut:
    lines: Sequence[OrderLine] = card.lines if card else order.lines()
    preview: Sequence[OrderLine] = card.preview if card else lines[:3]
    more = card.more_items if card else max(len(lines) - 3, 0)
    return OrderOut(
        order_id=str(order.order_id.value),
        customer_name=order.customer_name,
        table_number=order.table_number,
        message=order.message,
        total_amount=str(order.total_amount.amount),
        currency=order.total_amount.currency,
        status=order.status.value,
        bucket=order.bucket.value,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[_line_out(ln) for ln in lines],
        preview=[_line_out(ln) for ln in preview],
        more_items=more,
    )


def _board_out(board: BoardView) -> OrderListResponse:
    return OrderListResponse(
        count=board.count,
        orders=[_order_out(c.order, c) for c in board.cards],
    )


def _cart_command(cart_id: str, req: CartItemIn) -> CartItemCommand:
    return CartItemCommand(
        cart_id=cart_id,
        item_id=req.item_id,
        variant=req.temperature,
        use_item_variant="temperature" not in req.model_fields_set,
    )


# ---- App factory -----------------------------------------------------------


def create_app(
    browse_menu_uc: BrowseMenuUseCase,
    cart_uc: CartUseCase,
    place_order_uc: PlaceOrderUseCase,
    order_board_uc: OrderBoardUseCase,
    set_status_uc: SetStatusUseCase,
    on_shutdown: Sequence[Callable[[], None]] = (),
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        for close in on_shutdown:
            close()

    app = FastAPI(title="table_order", lifespan=lifespan)

    # --- exception handlers --------------------------------------------------

    @app.exception_handler(OrderError)
    async def handle_domain_error(_: Request, exc: OrderError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- customer side -------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/menu", response_model=MenuResponse)
    def browse_menu() -> Any:
        result = browse_menu_uc.browse_menu()
        if isinstance(result, Success):
            view = result.unwrap()
            return MenuResponse(
                sections=[
                    MenuSectionOut(
                        category=s.category.value,
                        count=len(s.items),
                        items=[_menu_item_out(it) for it in s.items],
                    )
                    for s in view.sections
                ]
            )
        raise result.failure()

    @app.get("/tables", response_model=TablesResponse)
    def tables() -> Any:
        return TablesResponse(tables=list(TABLE_NUMBERS))

    @app.post("/carts", response_model=CartResponse, status_code=201)
    def open_cart() -> Any:
        result = cart_uc.open_cart()
        if isinstance(result, Success):
            return _cart_out(result.unwrap())
        raise result.failure()

    @app.get(
        "/carts/{cart_id}",
        response_model=CartResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def view_cart(cart_id: str) -> Any:
        result = cart_uc.view_cart(cart_id)
        if isinstance(result, Success):
            return _cart_out(result.unwrap())
        raise result.failure()

    @app.post(
        "/carts/{cart_id}/items",
        response_model=CartResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def add_item(cart_id: str, req: CartItemIn) -> Any:
        result = cart_uc.add_item(_cart_command(cart_id, req))
        if isinstance(result, Success):
            return _cart_out(result.unwrap())
        raise result.failure()

    @app.post(
        "/carts/{cart_id}/items/remove",
        response_model=CartResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def remove_item(cart_id: str, req: CartItemIn) -> Any:
        result = cart_uc.remove_item(_cart_command(cart_id, req))
        if isinstance(result, Success):
            return _cart_out(result.unwrap())
        raise result.failure()

    @app.delete("/carts/{cart_id}/items", response_model=CartResponse)
    def reset_cart(cart_id: str) -> Any:
        result = cart_uc.reset_cart(cart_id)
        if isinstance(result, Success):
            return _cart_out(result.unwrap())
        raise result.failure()

    @app.delete(
        "/carts/{cart_id}",
        status_code=204,
        response_class=Response,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def close_cart(cart_id: str) -> Response:
        result = cart_uc.close_cart(cart_id)
        if isinstance(result, Success):
            return Response(status_code=204)
        raise result.failure()

    @app.post(
        "/carts/{cart_id}/orders",
        response_model=OrderReceiptResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def place_order(cart_id: str, req: PlaceOrderRequest) -> Any:
        result = place_order_uc.place_order(
            PlaceOrderCommand(
                cart_id=cart_id,
                customer_name=req.customer_name,
                table_number=req.table_number,
                message=req.message,
            )
        )
        if isinstance(result, Success):
            receipt = result.unwrap()
            return OrderReceiptResponse(
                order_id=str(receipt.order_id.value),
                customer_name=receipt.customer_name,
                table_number=receipt.table_number,
                total=str(receipt.total.amount),
                currency=receipt.total.currency,
                status=receipt.status.value,
            )
        raise result.failure()

    # --- owner side ----------------------------------------------------------

    @app.get(
        "/orders",
        response_model=OrderListResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def list_orders(refresh: bool = Query(False)) -> Any:
        result = order_board_uc.list_orders(BoardQuery(refresh=refresh))
        if isinstance(result, Success):
            return _board_out(result.unwrap())
        raise result.failure()

    @app.get(
        "/orders/by-status",
        response_model=StatusBucketsResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def orders_by_status(refresh: bool = Query(False)) -> Any:
        result = order_board_uc.by_status(BoardQuery(refresh=refresh))
        if isinstance(result, Success):
            view = result.unwrap()
            return StatusBucketsResponse(
                pending=_board_out(view.pending),
                in_progress=_board_out(view.in_progress),
                complete=_board_out(view.complete),
            )
        raise result.failure()

    @app.get(
        "/orders/by-table",
        response_model=TableGroupsResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def orders_by_table(refresh: bool = Query(False)) -> Any:
        result = order_board_uc.by_table(BoardQuery(refresh=refresh))
        if isinstance(result, Success):
            return TableGroupsResponse(
                tables=[
                    TableGroupOut(
                        table_number=g.table_number,
                        count=g.board.count,
                        orders=[_order_out(c.order, c) for c in g.board.cards],
                    )
                    for g in result.unwrap()
                ]
            )
        raise result.failure()

    @app.put(
        "/orders/{order_id}/status",
        response_model=StatusUpdateResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def set_status(order_id: str, req: SetStatusRequest) -> Any:
        result = set_status_uc.set_status(
            SetStatusCommand(order_id=order_id, status=req.status)
        )
        if isinstance(result, Success):
            order = result.unwrap()
            return StatusUpdateResponse(
                order=_order_out(order),
                message=f"Order status updated to {order.status.value}",
            )
        raise result.failure()

    return app
