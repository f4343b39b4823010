"""Amplification coefficient ramp.

The amp moves linearly from init_amp to next_amp between init_amp_time and
next_amp_time, then stays at next_amp. A ramp is a frozen value: start()
and stop() return a new ramp.

    RAMPING  --(now >= next_amp_time)-->  SETTLED
    any      --start(next, t, now)----->  RAMPING (anchored at current amp)
    any      --stop(now)--------------->  SETTLED (frozen at current amp)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from stablepool.constants import AMP_PRECISION, MAX_AMP, MAX_AMP_CHANGE, MIN_AMP_CHANGING_TIME
from stablepool.errors import IncorrectAmp, MaxAmpChangeAssertion, MinAmpChangingTimeAssertion
from stablepool.safe_int import S

logger = structlog.get_logger()


class RampPhase(str, Enum):
    """Phase of the amp ramp at a point in time."""

    RAMPING = "ramping"
    SETTLED = "settled"


@dataclass(frozen=True)
class AmpRamp:
    """Linear ramp of the amplification coefficient.

    Amps are scaled by AMP_PRECISION; times are Unix seconds.
    """

    init_amp: int
    init_amp_time: int
    next_amp: int
    next_amp_time: int

    @classmethod
    def fixed(cls, amp: int, now: int) -> AmpRamp:
        """A settled ramp at an unscaled amp, as set when the pair is created.

        Raises:
            IncorrectAmp: If amp is zero or exceeds MAX_AMP
        """
        _validate_amp(amp)
        scaled = amp * AMP_PRECISION
        return cls(init_amp=scaled, init_amp_time=now, next_amp=scaled, next_amp_time=now)

    def phase(self, now: int) -> RampPhase:
        if now < self.next_amp_time:
            return RampPhase.RAMPING
        return RampPhase.SETTLED

    def current_amp(self, now: int) -> int:
        """Effective amp (scaled) at time now."""
        if self.phase(now) is RampPhase.SETTLED:
            return self.next_amp

        elapsed_time = S(now) - self.init_amp_time
        time_range = S(self.next_amp_time) - self.init_amp_time

        # Separate branches keep the unsigned ranges non-negative
        if self.next_amp > self.init_amp:
            amp_range = S(self.next_amp) - self.init_amp
            return (S(self.init_amp) + (amp_range * elapsed_time) // time_range).value
        amp_range = S(self.init_amp) - self.next_amp
        return (S(self.init_amp) - (amp_range * elapsed_time) // time_range).value

    def start(self, next_amp: int, next_amp_time: int, now: int) -> AmpRamp:
        """Begin a new ramp toward an unscaled next_amp ending at next_amp_time.

        Raises:
            IncorrectAmp: If next_amp is zero or exceeds MAX_AMP
            MaxAmpChangeAssertion: If next_amp is more than MAX_AMP_CHANGE
                times away from the current amp
            MinAmpChangingTimeAssertion: If the current ramp started less than
                MIN_AMP_CHANGING_TIME ago or the new one is shorter than that
        """
        _validate_amp(next_amp)

        current_amp = self.current_amp(now)
        next_amp_scaled = next_amp * AMP_PRECISION

        if (
            next_amp_scaled * MAX_AMP_CHANGE < current_amp
            or next_amp_scaled > current_amp * MAX_AMP_CHANGE
        ):
            raise MaxAmpChangeAssertion(
                f"Amp change from {current_amp} to {next_amp_scaled} exceeds x{MAX_AMP_CHANGE}"
            )

        if (
            now < self.init_amp_time + MIN_AMP_CHANGING_TIME
            or next_amp_time < now + MIN_AMP_CHANGING_TIME
        ):
            raise MinAmpChangingTimeAssertion(
                f"Ramps must start {MIN_AMP_CHANGING_TIME}s after the previous one "
                f"and last at least {MIN_AMP_CHANGING_TIME}s"
            )

        logger.info(
            "amp_ramp_started",
            init_amp=current_amp,
            next_amp=next_amp_scaled,
            init_amp_time=now,
            next_amp_time=next_amp_time,
        )
        return AmpRamp(
            init_amp=current_amp,
            init_amp_time=now,
            next_amp=next_amp_scaled,
            next_amp_time=next_amp_time,
        )

    def stop(self, now: int) -> AmpRamp:
        """Freeze the amp at its current value."""
        current_amp = self.current_amp(now)
        logger.info("amp_ramp_stopped", amp=current_amp, time=now)
        return AmpRamp(
            init_amp=current_amp,
            init_amp_time=now,
            next_amp=current_amp,
            next_amp_time=now,
        )


def _validate_amp(amp: int) -> None:
    if amp <= 0 or amp > MAX_AMP:
        raise IncorrectAmp(f"Amp must be in range (0, {MAX_AMP}], got {amp}")
