"""Scales mapping entity metrics to the rate-vs-error indicator.

The indicator is a circle on each card: it grows and moves towards the
bottom right as traffic increases, and its colour follows the error rate.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from hystrixview.core.models import IndicatorGeometry

NAMED_COLORS = {
    "green": "#008000",
    "red": "#ff0000",
    "grey": "#808080",
    "black": "#000000",
}

MIN_POSITION_PERCENT = 30.0
MAX_POSITION_PERCENT = 40.0
MIN_RADIUS = 5.0
MAX_RADIUS = 125.0


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    color = NAMED_COLORS.get(color, color).lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


@dataclass(frozen=True)
class LinearScale:
    """Maps [domain_min, domain_max] linearly onto [range_min, range_max]."""

    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    def __call__(self, value: float) -> float:
        if not math.isfinite(value):
            return math.nan
        t = (value - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_min + t * (self.range_max - self.range_min)


@dataclass(frozen=True)
class PowScale:
    """Power scale; exponent 0.5 makes the circle area track the value."""

    exponent: float
    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    def _transform(self, value: float) -> float:
        return math.copysign(abs(value) ** self.exponent, value)

    def __call__(self, value: float) -> float:
        if not math.isfinite(value):
            return math.nan
        low = self._transform(self.domain_min)
        high = self._transform(self.domain_max)
        t = (self._transform(value) - low) / (high - low)
        return self.range_min + t * (self.range_max - self.range_min)


class ColorScale:
    """Piecewise linear interpolation between colours in RGB space.

    Values outside the domain take the colour of the nearest end.
    """

    def __init__(self, domain: Sequence[float], colors: Sequence[str]) -> None:
        if len(domain) != len(colors) or len(domain) < 2:
            raise ValueError("domain and colors must have the same length >= 2")
        self._domain = list(domain)
        self._colors = [_hex_to_rgb(c) for c in colors]

    def __call__(self, value: float) -> str | None:
        if not math.isfinite(value):
            return None
        domain = self._domain
        if value <= domain[0]:
            return self._format(self._colors[0])
        if value >= domain[-1]:
            return self._format(self._colors[-1])
        for i in range(1, len(domain)):
            if value <= domain[i]:
                t = (value - domain[i - 1]) / (domain[i] - domain[i - 1])
                start, end = self._colors[i - 1], self._colors[i]
                rgb = tuple(
                    round(a + t * (b - a)) for a, b in zip(start, end, strict=True)
                )
                return self._format(rgb)
        return self._format(self._colors[-1])

    @staticmethod
    def _format(rgb: Sequence[int]) -> str:
        return "#{:02x}{:02x}{:02x}".format(*rgb)


INDICATOR_COLORS = ColorScale([10, 25, 40, 50], ["green", "#FFCC00", "#FF9900", "red"])
ERROR_TEXT_COLORS = ColorScale([0, 10, 35, 50], ["grey", "black", "#FF9900", "red"])


class IndicatorScales:
    """Position, radius and colour scales for one entity class.

    Args:
        rate_domain: Requests per second per host at which the circle reaches
            its maximum size and position.
    """

    def __init__(self, rate_domain: float) -> None:
        self.position = LinearScale(
            0, rate_domain, MIN_POSITION_PERCENT, MAX_POSITION_PERCENT
        )
        self.radius = PowScale(0.5, 0, rate_domain, MIN_RADIUS, MAX_RADIUS)
        self.color = INDICATOR_COLORS

    def geometry(self, rate_per_host: float, error_signal: float) -> IndicatorGeometry:
        position = min(self.position(rate_per_host), MAX_POSITION_PERCENT)
        return IndicatorGeometry(
            x_percent=position,
            y_percent=position,
            radius=min(self.radius(rate_per_host), MAX_RADIUS),
            color=self.color(error_signal),
        )
