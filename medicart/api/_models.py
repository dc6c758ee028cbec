"""
Wire models: what the gateway sends back.

camelCase on the wire, snake_case in Python. Unknown fields are ignored so
backend additions never break the client.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Address
# ═══════════════════════════════════════════════════════════════════════════════


class AddressRecord(_Wire):
    id: int
    is_default: bool = Field(default=False, alias="isDefault")
    name: str | None = None
    phone: str | None = None
    address_line1: str | None = Field(default=None, alias="addressLine1")
    address_line2: str | None = Field(default=None, alias="addressLine2")
    street_address: str | None = Field(default=None, alias="streetAddress")
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    label: str | None = None

    @property
    def display(self) -> str:
        street = self.street_address or self.address_line1
        parts = [street, self.address_line2, self.city, self.state, self.pincode]
        text = ", ".join(p for p in parts if p)
        return f"{self.label}: {text}" if self.label and text else text


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class CartItemRecord(_Wire):
    id: int | None = None
    medicine_id: int = Field(alias="medicineId")
    medicine_name: str | None = Field(default=None, alias="medicineName")
    # None when the catalog reference did not resolve
    price: Decimal | None = None
    quantity: int = 1
    in_stock: bool | None = Field(default=None, alias="inStock")


# ═══════════════════════════════════════════════════════════════════════════════
# Order / Payment
# ═══════════════════════════════════════════════════════════════════════════════


class OrderReceipt(_Wire):
    id: int
    order_number: str | None = Field(default=None, alias="orderNumber")
    status: str | None = None


class PaymentReceipt(_Wire):
    payment_id: int | None = Field(default=None, alias="paymentId")
    transaction_id: str | None = Field(default=None, alias="transactionId")
    status: str | None = None
    message: str | None = None

    @property
    def failed(self) -> bool:
        return (self.status or "").upper() == "FAILED"


class PaymentRecord(_Wire):
    id: int
    order_id: int | None = Field(default=None, alias="orderId")
    amount: Decimal | None = None
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    payment_status: str | None = Field(default=None, alias="paymentStatus")
    transaction_id: str | None = Field(default=None, alias="transactionId")


__all__ = (
    "AddressRecord",
    "CartItemRecord",
    "OrderReceipt",
    "PaymentReceipt",
    "PaymentRecord",
)
