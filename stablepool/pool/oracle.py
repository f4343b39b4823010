"""Time-weighted cumulative price oracle.

Each accumulator grows by elapsed_seconds * price, where the price of an
asset is the amount of the other asset one whole unit of it buys on the
curve. Accumulators wrap modulo 2**128; consumers difference two samples
to get a TWAP over an interval.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from stablepool.constants import TWAP_PRECISION
from stablepool.math.precision import greater_precision, rescale
from stablepool.math.stable_math import calc_ask_amount
from stablepool.safe_int import S

from .amp import AmpRamp

logger = structlog.get_logger()


@dataclass(frozen=True)
class PriceCumulative:
    """Oracle accumulators and the time they were last advanced."""

    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0
    block_time_last: int = 0


def accumulate_prices(
    oracle: PriceCumulative,
    amp: AmpRamp,
    x: int,
    x_precision: int,
    y: int,
    y_precision: int,
    now: int,
) -> PriceCumulative | None:
    """Advance the accumulators to now using balances from before the action.

    Args:
        oracle: Current accumulators
        amp: Amp ramp (evaluated at now)
        x: Balance of asset 0, native precision
        x_precision: Decimals of asset 0
        y: Balance of asset 1, native precision
        y_precision: Decimals of asset 1
        now: Current Unix time

    Returns:
        New accumulators, or None if now is not after block_time_last.
        With an empty side the accumulators keep their value but the time
        still advances, so the empty period never contributes a price.
    """
    if now <= oracle.block_time_last:
        return None

    precision = greater_precision(x_precision, y_precision, TWAP_PRECISION)
    x = rescale(x, x_precision, precision)
    y = rescale(y, y_precision, precision)

    time_elapsed = S(now) - oracle.block_time_last

    pcl0 = oracle.price0_cumulative_last
    pcl1 = oracle.price1_cumulative_last

    if x != 0 and y != 0:
        current_amp = amp.current_amp(now)
        one_unit = rescale(1, 0, precision)

        price0 = calc_ask_amount(x, y, one_unit, current_amp)
        price1 = calc_ask_amount(y, x, one_unit, current_amp)

        pcl0 = (
            S(pcl0)
            .wrapping_add(rescale((time_elapsed * price0).to_uint128(), precision, TWAP_PRECISION))
            .value
        )
        pcl1 = (
            S(pcl1)
            .wrapping_add(rescale((time_elapsed * price1).to_uint128(), precision, TWAP_PRECISION))
            .value
        )
    else:
        logger.debug("oracle_skipped_empty_pool", x=x, y=y, time_elapsed=time_elapsed.value)

    return PriceCumulative(
        price0_cumulative_last=pcl0,
        price1_cumulative_last=pcl1,
        block_time_last=now,
    )
