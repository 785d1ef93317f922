from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from scancart.config import settings
from scancart.constants import BILL_FILENAME
from scancart.errors import (
    ERROR_INVALID_REQUEST,
    ERROR_INVALID_TAG,
    ERROR_PAYMENT_VERIFICATION_FAILED,
    SignatureMismatch,
    UnknownTag,
    UpstreamOrderFailure,
)
from scancart.services.bill_pdf import render_bill_pdf
from scancart.services.catalog import load_catalog
from scancart.services.notifier import ChangeNotifier
from scancart.services.payments import RazorpayClient, to_minor_units, verify_payment
from scancart.store.cart import CartStore, Snapshot

logger = logging.getLogger(__name__)

STATIC_DIR = Path(settings.static_dir)

catalog = load_catalog(settings.catalog_path)
notifier = ChangeNotifier()
store = CartStore(catalog, on_change=notifier.notify)
razorpay = RazorpayClient(
    key_id=settings.razorpay_key_id,
    key_secret=settings.razorpay_key_secret,
    api_url=settings.razorpay_api_url,
    currency=settings.currency,
)

app = FastAPI(title="ScanCart")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


class TagIn(BaseModel):
    tag: str


class OrderIn(BaseModel):
    amount: Decimal


class PaymentIn(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


@app.on_event("startup")
def _startup() -> None:
    logger.info("catalog loaded: %d products", len(catalog))


@app.on_event("shutdown")
async def _shutdown() -> None:
    await razorpay.aclose()


def _cart_json(lines: Snapshot) -> list[dict[str, Any]]:
    return [line.to_dict() for line in lines]


# ---------------- errors ----------------

@app.exception_handler(UnknownTag)
async def _unknown_tag(request: Request, exc: UnknownTag) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": ERROR_INVALID_TAG})


@app.exception_handler(SignatureMismatch)
async def _signature_mismatch(request: Request, exc: SignatureMismatch) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": ERROR_PAYMENT_VERIFICATION_FAILED},
    )


@app.exception_handler(UpstreamOrderFailure)
async def _upstream_failure(request: Request, exc: UpstreamOrderFailure) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": ERROR_INVALID_REQUEST})


# ---------------- pages ----------------

@app.get("/")
def index():
    page = STATIC_DIR / "index.html"
    if not page.is_file():
        raise HTTPException(status_code=404, detail="index.html not found")
    return FileResponse(str(page))


# ---------------- cart ----------------

@app.post("/update-cart")
async def update_cart(body: TagIn):
    lines = store.add_by_tag(body.tag)
    return {"success": True, "message": "Cart updated", "cart": _cart_json(lines)}


@app.post("/remove-item")
async def remove_item(body: TagIn):
    lines = store.remove_one_by_tag(body.tag)
    return {"success": True, "message": "Item updated", "cart": _cart_json(lines)}


@app.post("/clear-cart")
async def clear_cart():
    lines = store.clear()
    return {"success": True, "message": "Cart cleared", "cart": _cart_json(lines)}


@app.get("/cart")
async def get_cart():
    return _cart_json(store.snapshot())


@app.websocket("/ws")
async def cart_updates(websocket: WebSocket):
    await notifier.connect(websocket)
    try:
        while True:
            # displays don't talk back; anything they send is ignored until the close
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(websocket)


# ---------------- bill ----------------

@app.get("/generate-bill")
async def generate_bill():
    pdf = render_bill_pdf(store.snapshot())
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{BILL_FILENAME}"'},
    )


# ---------------- payment ----------------

@app.post("/create-order")
async def create_order(body: OrderIn):
    try:
        to_minor_units(body.amount)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    order = await razorpay.create_order(body.amount)
    return {"success": True, "orderId": order.order_id, "amount": order.amount}


@app.post("/verify-payment")
async def verify(body: PaymentIn):
    payment_id = verify_payment(
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
        settings.razorpay_key_secret,
    )
    return {"success": True, "message": "Payment Successful!", "paymentId": payment_id}
