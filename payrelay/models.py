"""
API Pydantic Models

Request and response bodies for the relay endpoints.
"""
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


# ==================== ORDER MODELS ====================

class CreateOrderRequest(BaseModel):
    amount: Decimal
    currency: Optional[str] = None
    receipt: Optional[str] = Field(default=None, max_length=40)
    notes: Dict[str, str] = Field(default_factory=dict)


class CreateOrderResponse(BaseModel):
    ok: bool = True
    our_order_id: str
    razorpay_order_id: str
    amount: float
    amount_minor: int
    currency: str
    key_id: str


class OrderStatusResponse(BaseModel):
    ok: bool = True
    our_order_id: str
    razorpay_order_id: str
    amount: float
    currency: str
    status: str
    payment_id: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


# ==================== PAYMENT MODELS ====================

class VerifyPaymentRequest(BaseModel):
    # Optional so that missing fields get the relay's own 400 instead of a 422
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None

    @field_validator("razorpay_order_id", "razorpay_payment_id", "razorpay_signature", mode="before")
    @classmethod
    def drop_non_string(cls, v):
        # A non-string id or signature is treated as absent
        return v if isinstance(v, str) else None


class VerifyPaymentResponse(BaseModel):
    ok: bool = True
    our_order_id: str
    status: str
