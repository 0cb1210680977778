# freshlink/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date as Date
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from .accounts import authenticate, get_user, public_user, seed_demo_users
from .auth import create_token, decode_token
from .config import configure_logging, settings
from .db import Base, SessionLocal, engine, get_db
from .errors import RemoteError, ValidationError
from .ordering.aggregate import dealer_dashboard, hotel_summary
from .ordering.blob_store import BlobStore
from .ordering.entities import NOTE_REQUIRED_STATUSES, HotelRef, OrderStatus, PendingItem
from .ordering.nlp import canonical_item_name
from .ordering.orders import check_items, create_orders, today_iso
from .ordering.prices import dump_price_table
from .ordering.store import MarketStore
from .remote import submit_orders

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.seed_demo_users:
        with SessionLocal() as db:
            seed_demo_users(db)
    app.state.store = MarketStore.load(BlobStore(SessionLocal))
    yield


app = FastAPI(title="FreshLink Ordering API", lifespan=lifespan)


# -------------------
# Schemas
# -------------------
class LoginIn(BaseModel):
    email: EmailStr
    password: str
    role: Optional[str] = None  # hotel | dealer


class SubmitOrdersIn(BaseModel):
    # orders are always placed for today; a client-sent date is ignored
    items: List[PendingItem]


class PriceIn(BaseModel):
    item_name: str = Field(alias="itemName")
    amount: Any
    unit: str = "kg"


class StatusIn(BaseModel):
    item_name: str = Field(alias="itemName")
    date: Optional[str] = None
    status: OrderStatus
    note: str = ""


# -------------------
# Errors
# -------------------
@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RemoteError)
async def _remote_error(request: Request, exc: RemoteError):
    return JSONResponse(status_code=502, content={"detail": "Could not reach the order service. Please try again."})


# -------------------
# Helpers / dependencies
# -------------------
def get_store(request: Request) -> MarketStore:
    return request.app.state.store


def get_remote_client() -> Optional[httpx.Client]:
    # None lets remote.submit_orders open its own short-lived client
    return None


def _day(raw: Optional[str]) -> str:
    if not raw:
        return today_iso()
    try:
        return Date.fromisoformat(raw.strip()).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date {raw!r}, expected YYYY-MM-DD") from None


def current_identity(authorization: str | None = Header(default=None)) -> Dict[str, str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    token = authorization.split(" ", 1)[1].strip()
    identity = decode_token(token)
    if not identity:
        raise HTTPException(status_code=401, detail="Invalid token")
    return identity


def require_hotel(identity: Dict[str, str] = Depends(current_identity), db: Session = Depends(get_db)) -> HotelRef:
    if identity["role"] != "hotel":
        raise HTTPException(status_code=403, detail="Hotel account required")
    u = get_user(db, identity["sub"])
    if not u:
        raise HTTPException(status_code=401, detail="Unknown user")
    return HotelRef(id=u.public_id, name=u.name)


def require_dealer(identity: Dict[str, str] = Depends(current_identity)) -> Dict[str, str]:
    if identity["role"] != "dealer":
        raise HTTPException(status_code=403, detail="Dealer account required")
    return identity


# -------------------
# Health
# -------------------
@app.get("/")
def root():
    return {"ok": True, "service": "freshlink-api"}


# -------------------
# Auth
# -------------------
@app.post("/auth/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    u = authenticate(db, payload.email, payload.password, role=payload.role)
    if not u:
        logger.warning("Failed %s login for %s", payload.role or "any-role", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"token": create_token(u.public_id, u.role), "user": public_user(u), "role": u.role}


@app.get("/me")
def me(identity: Dict[str, str] = Depends(current_identity), db: Session = Depends(get_db)):
    u = get_user(db, identity["sub"])
    if not u:
        raise HTTPException(status_code=401, detail="Unknown user")
    return {"user": public_user(u), "role": u.role}


# -------------------
# Prices
# -------------------
@app.get("/prices")
def list_prices(_: Dict[str, str] = Depends(current_identity), store: MarketStore = Depends(get_store)):
    return {"prices": dump_price_table(store.prices)}


@app.put("/dealer/prices")
def put_price(
    payload: PriceIn,
    _: Dict[str, str] = Depends(require_dealer),
    store: MarketStore = Depends(get_store),
):
    entry = store.set_price(payload.item_name, payload.amount, payload.unit)
    return {"ok": True, "itemName": canonical_item_name(payload.item_name), "price": entry.to_json()}


@app.delete("/dealer/prices/{item_name:path}")
def remove_price(
    item_name: str,
    _: Dict[str, str] = Depends(require_dealer),
    store: MarketStore = Depends(get_store),
):
    return {"ok": True, "removed": store.delete_price(item_name)}


# -------------------
# Dealer
# -------------------
@app.get("/dealer/dashboard")
def dashboard(
    date: Optional[str] = Query(default=None),
    q: str = Query(default=""),
    _: Dict[str, str] = Depends(require_dealer),
    store: MarketStore = Depends(get_store),
):
    orders, prices = store.snapshot()
    return dealer_dashboard(orders, _day(date), prices, query=q, currency_symbol=settings.currency_symbol)


@app.post("/dealer/status")
def set_status(
    payload: StatusIn,
    _: Dict[str, str] = Depends(require_dealer),
    store: MarketStore = Depends(get_store),
):
    note = payload.note.strip()
    if payload.status in NOTE_REQUIRED_STATUSES:
        if not note:
            raise ValidationError(f"A note is required when marking an item {payload.status}")
    else:
        # dealerNote only accompanies partial / unavailable
        note = ""

    updated = store.update_status(payload.item_name, _day(payload.date), payload.status, note)
    return {"ok": True, "updated": updated}


@app.delete("/dealer/orders/{order_id}")
def dealer_remove_order(
    order_id: str,
    _: Dict[str, str] = Depends(require_dealer),
    store: MarketStore = Depends(get_store),
):
    return {"ok": True, "removed": store.remove_order(order_id)}


# -------------------
# Hotel
# -------------------
@app.get("/hotel/orders")
def my_orders(
    date: Optional[str] = Query(default=None),
    hotel: HotelRef = Depends(require_hotel),
    store: MarketStore = Depends(get_store),
):
    orders, prices = store.snapshot()
    return hotel_summary(orders, hotel.id, _day(date), prices, currency_symbol=settings.currency_symbol)


@app.post("/hotel/orders")
def submit(
    payload: SubmitOrdersIn,
    hotel: HotelRef = Depends(require_hotel),
    store: MarketStore = Depends(get_store),
    client: Optional[httpx.Client] = Depends(get_remote_client),
):
    valid, rejected = check_items(payload.items)
    if not valid:
        raise HTTPException(status_code=400, detail={"message": "No valid items to order", "rejected": rejected})

    if settings.orders_remote_url:
        submit_orders(settings.orders_remote_url, hotel, valid, timeout=settings.remote_timeout_s, client=client)

    created = store.add_orders(create_orders(valid, hotel, today_iso()))
    return {"ok": True, "orders": [o.to_json() for o in created], "rejected": rejected}


@app.delete("/hotel/orders/{order_id}")
def hotel_remove_order(
    order_id: str,
    hotel: HotelRef = Depends(require_hotel),
    store: MarketStore = Depends(get_store),
):
    return {"ok": True, "removed": store.remove_order(order_id, hotel_id=hotel.id)}
