"""
Pure pool algorithms: fixed-point math, curve, guards, state transitions.
"""

from .curve import (
    compute_initial_deposit,
    compute_proportional_deposit,
    compute_proportional_withdraw,
    compute_swap_output,
    constant_product,
)
from .engine import deposit, initialize, quote_swap, set_locked, swap, withdraw

__all__ = [
    "compute_initial_deposit",
    "compute_proportional_deposit",
    "compute_proportional_withdraw",
    "compute_swap_output",
    "constant_product",
    "deposit",
    "initialize",
    "quote_swap",
    "set_locked",
    "swap",
    "withdraw",
]
