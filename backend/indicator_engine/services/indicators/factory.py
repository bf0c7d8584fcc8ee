"""
Indicator Factory

Single construction point for Indicator instances. Kinds arriving as names
(from the preset table or an API request) are resolved here so an unknown
name fails before anything is registered.
"""

import logging
from typing import Sequence, Union

from indicator_engine.schemas.indicators import IndicatorKind, IndicatorSpec
from indicator_engine.schemas.market import Timeframe
from indicator_engine.services.cache.indicator_cache import IndicatorCache
from indicator_engine.services.indicators.indicator import Indicator
from indicator_engine.services.prices.interface import PriceSourceInterface

logger = logging.getLogger(__name__)


class IndicatorFactory:
    def __init__(self, cache: IndicatorCache, price_source: PriceSourceInterface):
        self.cache = cache
        self.price_source = price_source

    def create(
        self,
        kind: Union[IndicatorKind, str],
        indicator_id: str,
        symbol: str,
        timeframe: Timeframe,
        params: Sequence[float],
    ) -> Indicator:
        """
        Build an indicator from its kind and positional parameter vector.

        Raises UnknownIndicatorError for an unknown kind or a parameter
        vector that does not fit the kind's layout.
        """
        if not isinstance(kind, IndicatorKind):
            kind = IndicatorKind.from_name(kind)

        spec = IndicatorSpec.from_params(kind, symbol, timeframe, params)
        logger.debug(f"Built {kind.name} {indicator_id} for {symbol} ({spec.serialize_params()})")
        return Indicator(indicator_id, spec, self.cache, self.price_source)
