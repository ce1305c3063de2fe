from __future__ import annotations

from table_order.adapters.inbound.web.fastapi_app import create_app
from table_order.bootstrap import build_usecases
from table_order.config import load_settings

usecases = build_usecases(load_settings())
app = create_app(
    usecases.browse_menu,
    usecases.cart,
    usecases.place_order,
    usecases.order_board,
    usecases.set_status,
    on_shutdown=(usecases.close,),
)
