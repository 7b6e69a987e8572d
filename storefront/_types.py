"""
Core types for storefront.

Re-exports from kungfu + call and identifier aliases.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Call[T] = Callable[[], Awaitable[T]]
"""Zero-argument async call to a collaborator (gateway, cart store)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

# Backend ids are opaque strings (cuid/uuid); never parsed on this side.
type OrderId = str
type PaymentId = str
type AddressId = str
type ProductId = str
type UserId = str

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    "Call",
    # Identifiers
    "OrderId",
    "PaymentId",
    "AddressId",
    "ProductId",
    "UserId",
)
