"""
FundConfig — Параметры фонда, фиксируемые при создании

Immutable Pydantic модель. Загрузка из JSON проходит двухступенчатую
проверку: сначала JSON Schema контракт (fund_config.json), затем
Pydantic-валидация со связями между полями.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator

from src.core.contracts import validate_fund_config
from src.core.math.proration import PROTOCOL_FEE_PERCENT

logger = logging.getLogger(__name__)


# Срок исполнения swap по умолчанию (секунды от текущего времени)
DEFAULT_SWAP_DEADLINE_SEC = 60


class FundConfig(BaseModel):
    """
    Конфигурация фонда.

    Поля:
    - fund_address: идентификатор фонда в custody
    - fee_to: получатель комиссии протокола
    - owner: получатель средств при административном перераспределении (invest)
    - asset_a / asset_b: целевые активы пула
    - supported_assets: начальный allow-list входных активов
    - protocol_fee_percent: комиссия с доли прибыли (целые проценты)
    - swap_deadline_sec: срок, передаваемый в Conversion Gateway
    """

    fund_address: str = Field(default="fund", min_length=1, description="Адрес фонда")
    fee_to: str = Field(..., min_length=1, description="Получатель комиссии")
    owner: str = Field(..., min_length=1, description="Получатель invest-переводов")
    asset_a: str = Field(..., min_length=1, description="Целевой актив A")
    asset_b: str = Field(..., min_length=1, description="Целевой актив B")
    supported_assets: tuple[str, ...] = Field(
        default_factory=tuple, description="Начальный allow-list входных активов"
    )
    protocol_fee_percent: int = Field(
        default=PROTOCOL_FEE_PERCENT, ge=0, le=100, description="Комиссия протокола (%)"
    )
    swap_deadline_sec: int = Field(
        default=DEFAULT_SWAP_DEADLINE_SEC, gt=0, description="Срок исполнения swap (сек)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_identities(self) -> "FundConfig":
        """Целевые активы различны, фонд не является получателем комиссии."""
        if self.asset_a == self.asset_b:
            raise ValueError(f"asset_a and asset_b must differ, got {self.asset_a!r}")
        if self.fee_to == self.fund_address:
            raise ValueError("fee_to cannot be the fund itself")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FundConfig":
        """
        Создание конфигурации из dict с проверкой JSON Schema контракта.

        Raises:
            jsonschema.ValidationError: Если данные не соответствуют схеме
            pydantic.ValidationError: Если нарушены связи между полями
        """
        validate_fund_config(data)
        return cls.model_validate(data)


def load_fund_config(path: str | Path) -> FundConfig:
    """
    Загрузка конфигурации фонда из JSON файла.

    Args:
        path: Путь к JSON файлу

    Returns:
        FundConfig

    Raises:
        FileNotFoundError: Если файл не найден
        json.JSONDecodeError: Если файл не является валидным JSON
        jsonschema.ValidationError: Если данные не соответствуют схеме
    """
    config_path = Path(path)
    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = FundConfig.from_dict(data)
    logger.info(
        "Loaded fund config from %s: assets=(%s, %s), fee=%d%%",
        config_path,
        config.asset_a,
        config.asset_b,
        config.protocol_fee_percent,
    )
    return config
