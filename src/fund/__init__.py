"""Fund — пул двух активов: учёт долей, конвертация депозитов, выводы с комиссией.

Компоненты (от листьев к корню):
- PositionLedger: позиции инвесторов и Total
- ConversionGateway: внешний сервис котировок и обмена
- FundCoordinator: deposit / withdraw / invest
"""

from src.core.errors import (
    ConversionFailed,
    FundError,
    InvalidAmount,
    LedgerCorruption,
    NoFunds,
    NoShares,
    ReentrantCall,
    TransferFailed,
    UnsupportedAsset,
)

from .allowlist import AssetAllowList
from .config import FundConfig, load_fund_config
from .coordinator import FundCoordinator
from .custody import AssetCustody, InMemoryCustody, TransactionalCustody
from .gateway import BestQuoteGateway, ConversionGateway, FixedRateGateway, Rate
from .ledger import PositionLedger

__all__ = [
    # Coordinator
    "FundCoordinator",
    "FundConfig",
    "load_fund_config",
    # Ledger
    "PositionLedger",
    # Collaborators
    "AssetAllowList",
    "AssetCustody",
    "TransactionalCustody",
    "InMemoryCustody",
    "ConversionGateway",
    "FixedRateGateway",
    "BestQuoteGateway",
    "Rate",
    # Errors
    "FundError",
    "UnsupportedAsset",
    "InvalidAmount",
    "NoFunds",
    "NoShares",
    "TransferFailed",
    "ConversionFailed",
    "ReentrantCall",
    "LedgerCorruption",
]
