"""Gateway client and money helpers."""
from .razorpay import RazorpayClient

__all__ = ["RazorpayClient"]
