"""
Address selection gate.

    from medicart.address import AddressGate
"""

from __future__ import annotations

from medicart.address._gate import preferred, AddressGate

__all__ = ("preferred", "AddressGate")
