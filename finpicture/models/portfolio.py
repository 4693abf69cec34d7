"""Mutable collection of assets keyed by id.

Assets are immutable values; updates replace the stored value by id.
Aggregations over the collection live in engine.portfolio.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import date
from decimal import Decimal

from finpicture.models.asset import Asset
from finpicture.models.errors import AssetNotFoundError, DuplicateAssetError

logger = logging.getLogger(__name__)


class Portfolio:
    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: dict[str, Asset] = {}
        for asset in assets:
            self.add(asset)

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets.values()))

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._assets

    @property
    def assets(self) -> list[Asset]:
        return list(self._assets.values())

    def get(self, asset_id: str) -> Asset:
        try:
            return self._assets[asset_id]
        except KeyError:
            raise AssetNotFoundError(asset_id) from None

    def add(self, asset: Asset) -> None:
        if asset.id in self._assets:
            raise DuplicateAssetError(f"Asset id {asset.id} already in portfolio")
        self._assets[asset.id] = asset
        logger.debug("Added asset %s (%s)", asset.id, asset.name)

    def remove(self, asset_id: str) -> Asset:
        asset = self.get(asset_id)
        del self._assets[asset_id]
        logger.debug("Removed asset %s (%s)", asset_id, asset.name)
        return asset

    def update(self, asset: Asset) -> None:
        """Replace the stored asset with the same id."""
        self.get(asset.id)
        self._assets[asset.id] = asset
        logger.debug("Updated asset %s (%s)", asset.id, asset.name)

    def update_market_value(self, asset_id: str, value: Decimal) -> Asset:
        updated = self.get(asset_id).with_market_value(value)
        self._assets[asset_id] = updated
        logger.info("Market value of %s set to %s", updated.name, value)
        return updated

    def mark_loan_paid_off(self, asset_id: str, at: date | None = None) -> Asset:
        updated = self.get(asset_id).with_loan_paid_off(at)
        self._assets[asset_id] = updated
        return updated
