"""Data types emitted by the pool engine.

All types are frozen dataclasses (immutable). The engine never moves funds
itself: it returns instructions that the ledger executes atomically, together
with the next ``Pool`` record to commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Tuple, Union

from ..state.pools import Pool


@unique
class Direction(Enum):
    X_FOR_Y = "x_for_y"
    Y_FOR_X = "y_for_x"


@unique
class Signer(Enum):
    """Which authorization context a transfer runs under."""
    USER = "user"  # the verified caller
    POOL = "pool"  # the pool's own authority over its reserve account


@dataclass(frozen=True)
class Transfer:
    asset: str
    source: str
    destination: str
    amount: int
    signer: Signer


@dataclass(frozen=True)
class MintShare:
    pool_id: str
    to: str
    amount: int


@dataclass(frozen=True)
class BurnShare:
    pool_id: str
    source: str
    amount: int


Instruction = Union[Transfer, MintShare, BurnShare]


@dataclass(frozen=True)
class DepositResult:
    x_spent: int
    y_spent: int
    lp_minted: int
    pool: Pool
    instructions: Tuple[Instruction, ...]


@dataclass(frozen=True)
class WithdrawResult:
    x_received: int
    y_received: int
    lp_burned: int
    pool: Pool
    instructions: Tuple[Instruction, ...]


@dataclass(frozen=True)
class SwapResult:
    direction: Direction
    amount_in: int
    amount_out: int
    fee: int
    k_before: int
    k_after: int
    pool: Pool
    instructions: Tuple[Instruction, ...]
