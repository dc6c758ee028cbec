"""
Gateway client and wire models.

    from medicart.api import MedicartApi

    async with MedicartApi(sessions) as api:
        receipt = await api.place_order(address_id)
"""

from __future__ import annotations

from medicart.api._models import (
    AddressRecord,
    CartItemRecord,
    OrderReceipt,
    PaymentReceipt,
    PaymentRecord,
)
from medicart.api._client import ApiError, MedicartApi

__all__ = (
    "ApiError",
    "MedicartApi",
    "AddressRecord",
    "CartItemRecord",
    "OrderReceipt",
    "PaymentReceipt",
    "PaymentRecord",
)
