"""
Asset Custody — Интерфейс хранения и перевода активов

Фонд не хранит балансы сам: фактические Pool Holdings читаются из custody.
Любая операция перевода может завершиться TransferFailed, что прерывает
всю операцию фонда.

InMemoryCustody — детерминированная реализация для симуляции и тестов:
балансы, allowance, mint, hooks получателя (модель враждебного callback
при переводе) и snapshot/restore для атомарного отката.
"""

import copy
from typing import Any, Callable, Dict, List, Protocol, Tuple, runtime_checkable

from src.core.errors import TransferFailed
from src.core.math.integer_safeguards import validate_uint

# Callback получателя: (asset, sender, recipient, amount)
TransferHook = Callable[[str, str, str, int], None]


@runtime_checkable
class AssetCustody(Protocol):
    """Минимальный интерфейс custody, используемый фондом."""

    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def transfer_from(
        self, asset: str, spender: str, owner: str, recipient: str, amount: int
    ) -> None:
        ...


@runtime_checkable
class TransactionalCustody(AssetCustody, Protocol):
    """Custody с поддержкой отката (all-or-nothing для операций фонда)."""

    def snapshot(self) -> Any:
        ...

    def restore(self, state: Any) -> None:
        ...


class InMemoryCustody:
    """
    In-memory реестр балансов по активам.

    Балансы: asset → holder → amount
    Allowance: (asset, owner, spender) → amount
    """

    def __init__(self):
        self._balances: Dict[str, Dict[str, int]] = {}
        self._allowances: Dict[Tuple[str, str, str], int] = {}
        self._hooks: Dict[str, List[TransferHook]] = {}

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get(asset, {}).get(holder, 0)

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        return self._allowances.get((asset, owner, spender), 0)

    # -------------------------------------------------------------------------
    # Управление балансами
    # -------------------------------------------------------------------------

    def mint(self, asset: str, holder: str, amount: int) -> None:
        """Выпуск актива на баланс holder (начальное наполнение симуляции)."""
        validate_uint(amount, "amount")
        holders = self._balances.setdefault(asset, {})
        holders[holder] = holders.get(holder, 0) + amount

    def approve(self, asset: str, owner: str, spender: str, amount: int) -> None:
        """Разрешение spender списывать до amount с баланса owner."""
        validate_uint(amount, "amount")
        self._allowances[(asset, owner, spender)] = amount

    def add_hook(self, recipient: str, hook: TransferHook) -> None:
        """Регистрация callback, вызываемого после каждого перевода recipient."""
        self._hooks.setdefault(recipient, []).append(hook)

    # -------------------------------------------------------------------------
    # Переводы
    # -------------------------------------------------------------------------

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """
        Перевод amount актива от sender к recipient.

        Raises:
            TransferFailed: Если баланс sender недостаточен
        """
        validate_uint(amount, "amount")
        self._move(asset, sender, recipient, amount)
        self._run_hooks(asset, sender, recipient, amount)

    def transfer_from(
        self, asset: str, spender: str, owner: str, recipient: str, amount: int
    ) -> None:
        """
        Перевод от owner к recipient по allowance, выданному spender.

        Raises:
            TransferFailed: Если allowance или баланс owner недостаточен
        """
        validate_uint(amount, "amount")
        key = (asset, owner, spender)
        allowed = self._allowances.get(key, 0)
        if allowed < amount:
            raise TransferFailed(
                f"insufficient allowance: {owner} -> {spender} {asset} "
                f"allowed={allowed} requested={amount}"
            )
        self._move(asset, owner, recipient, amount)
        self._allowances[key] = allowed - amount
        self._run_hooks(asset, owner, recipient, amount)

    def _move(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        holders = self._balances.setdefault(asset, {})
        available = holders.get(sender, 0)
        if available < amount:
            raise TransferFailed(
                f"insufficient balance: {sender} {asset} "
                f"available={available} requested={amount}"
            )
        holders[sender] = available - amount
        holders[recipient] = holders.get(recipient, 0) + amount

    def _run_hooks(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        for hook in list(self._hooks.get(recipient, [])):
            hook(asset, sender, recipient, amount)

    # -------------------------------------------------------------------------
    # Откат
    # -------------------------------------------------------------------------

    def snapshot(self) -> Tuple[Dict[str, Dict[str, int]], Dict[Tuple[str, str, str], int]]:
        return copy.deepcopy(self._balances), dict(self._allowances)

    def restore(
        self, state: Tuple[Dict[str, Dict[str, int]], Dict[Tuple[str, str, str], int]]
    ) -> None:
        balances, allowances = state
        self._balances = copy.deepcopy(balances)
        self._allowances = dict(allowances)
