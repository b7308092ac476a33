"""
Contract Validation Module

Модуль для валидации JSON контрактов фонда (конфигурация и события).
"""

from .validators import (
    ContractValidator,
    DepositEventValidator,
    FundConfigValidator,
    SchemaLoader,
    WithdrawEventValidator,
    validate_deposit_event,
    validate_fund_config,
    validate_withdraw_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "FundConfigValidator",
    "DepositEventValidator",
    "WithdrawEventValidator",
    # Functions
    "validate_fund_config",
    "validate_deposit_event",
    "validate_withdraw_event",
]
