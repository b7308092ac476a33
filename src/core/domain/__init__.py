"""
Domain models and value objects.

Contains fundamental domain entities of the fund: Balances (Position/Total)
and the observable Deposit/Withdraw events.
"""

from src.core.domain.events import DepositEvent, FundEvent, WithdrawEvent
from src.core.domain.position import Balances

__all__ = [
    # Position / Total
    "Balances",
    # Events
    "DepositEvent",
    "WithdrawEvent",
    "FundEvent",
]
