"""
Asset Allow-list — Допустимые входные активы депозита
"""

from typing import Iterable


class AssetAllowList:
    """Множество входных активов, принимаемых фондом."""

    def __init__(self, assets: Iterable[str] = ()):
        self._assets: set[str] = set(assets)

    def is_supported(self, asset: str) -> bool:
        return asset in self._assets
