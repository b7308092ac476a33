"""
Fund Errors — Таксономия ошибок фонда

Все пользовательские и внешние отказы наследуются от FundError и
прерывают операцию целиком (all-or-nothing). LedgerCorruption: отдельная
ветка: это нарушение внутреннего инварианта, а не ошибка пользователя,
и ядро её никогда не перехватывает.
"""


class FundError(Exception):
    """Базовый класс для всех восстанавливаемых ошибок фонда."""


class UnsupportedAsset(FundError):
    """Входной актив отсутствует в allow-list."""


class InvalidAmount(FundError):
    """Сумма депозита слишком мала для разделения на две ненулевые половины."""


class NoFunds(FundError):
    """В пуле нет ни одной зарегистрированной доли (Total == 0)."""


class NoShares(FundError):
    """У инвестора нет активной позиции."""


class TransferFailed(FundError):
    """Операция custody отклонена (недостаточный баланс или allowance)."""


class ConversionFailed(FundError):
    """Conversion Gateway отклонил swap (slippage, deadline, неизвестная пара)."""


class ReentrantCall(FundError):
    """Вложенный вызов операции фонда во время выполнения другой операции."""


class LedgerCorruption(RuntimeError):
    """
    Нарушен инвариант учёта (Total < claim, расхождение Total и суммы позиций).

    Фатальная ошибка: указывает на повреждение Ledger, не на ошибку ввода.
    """
