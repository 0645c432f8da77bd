"""
Synthetic daily series generation.

Produces plausible hydrological/weather series when the real provider is
unreachable. Values combine a pseudo-random draw, a per-variable baseline and
a seasonal sinusoid over the day of year:

    season = sin(day_of_year / 365 * 2π)

Without a location the per-variable formulas are:

    precipitation       rand*8 + season*3              (>= 0)
    soilMoisture        rand*0.25 + 0.15 + season*0.1  (>= 0.05)
    temperature         20 + rand*15 + season*10
    humidity            50 + rand*30 + season*15       (20..90)
    evapotranspiration  rand*4 + 2 + season*2          (>= 0)
    runoff              rand*3 + season*2              (>= 0)
    unknown             rand*10

With a location, temperature, precipitation and evapotranspiration also carry
a latitude factor (|lat| / 90) and a smooth day-to-day variation
(sin(i * 0.7) * 0.3, i being the day offset from the start).
"""

import logging
import math
import random
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..core import DateUtils, constants
from ..models import SeriesPoint, Variable, VariableKey, parse_variable
from ..processing.rounding import round_half_up


# A callable producing floats in [0, 1), e.g. random.Random().random
RandomSource = Callable[[], float]
Location = Tuple[float, float]

# (min, max) clamp per variable; None means unbounded on that side
CLAMPS: Dict[Variable, Tuple[Optional[float], Optional[float]]] = {
    Variable.PRECIPITATION: (0.0, None),
    Variable.SOIL_MOISTURE: (0.05, None),
    Variable.TEMPERATURE: (None, None),
    Variable.HUMIDITY: (20.0, 90.0),
    Variable.EVAPOTRANSPIRATION: (0.0, None),
    Variable.RUNOFF: (0.0, None),
}


def seasonal_factor(day: date) -> float:
    """Seasonal sinusoid for a calendar day, in [-1, 1]."""
    return math.sin((DateUtils.day_of_year(day) / 365) * 2 * math.pi)


def latitude_factor(latitude: float) -> float:
    """Distance from the equator scaled to [0, 1]."""
    return min(abs(latitude), 90.0) / 90


def daily_variation(day_index: int) -> float:
    return math.sin(day_index * 0.7) * 0.3


def clamp(value: float, bounds: Tuple[Optional[float], Optional[float]]) -> float:
    low, high = bounds
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


class SeriesSynthesizer:
    """Generate synthetic daily series for a variable and date range."""

    def __init__(
        self,
        rng: Optional[Union[random.Random, RandomSource]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize synthesizer.

        Args:
            rng: random.Random instance or zero-argument callable returning
                 floats in [0, 1). Defaults to an entropy-seeded generator.
            logger: Logger instance
        """
        if rng is None:
            rng = random.Random()
        self._rand: RandomSource = rng.random if hasattr(rng, "random") else rng
        self.logger = logger or logging.getLogger(__name__)

    def synthesize(
        self,
        variable: Union[str, VariableKey],
        start_date: date,
        end_date: date,
        location: Optional[Location] = None
    ) -> List[SeriesPoint]:
        """
        Generate one point per calendar day from start_date to end_date inclusive.

        Args:
            variable: Variable key or parsed variable
            start_date: First day of the series
            end_date: Last day of the series (an earlier end yields an empty list)
            location: Optional (latitude, longitude) enabling regional formulas

        Returns:
            Points in ascending date order, values rounded to 2 decimals
        """
        parsed = parse_variable(variable)
        series: List[SeriesPoint] = []

        for index, day in enumerate(DateUtils.iter_days(start_date, end_date)):
            season = seasonal_factor(day)
            if location is None:
                value = self._value(parsed, season)
            else:
                value = self._regional_value(parsed, season, index, location[0])

            series.append(SeriesPoint(
                date=DateUtils.format_date(day),
                value=round_half_up(value, constants.SYNTHETIC_DECIMALS),
            ))

        self.logger.debug(
            f"Synthesized {len(series)} points for {parsed.key} "
            f"({start_date} to {end_date})"
        )
        return series

    def _value(self, variable: VariableKey, season: float) -> float:
        """Value for one day using the location-independent formulas."""
        rand = self._rand()

        if variable is Variable.PRECIPITATION:
            value = rand * 8 + season * 3
        elif variable is Variable.SOIL_MOISTURE:
            value = rand * 0.25 + 0.15 + season * 0.1
        elif variable is Variable.TEMPERATURE:
            value = 20 + rand * 15 + season * 10
        elif variable is Variable.HUMIDITY:
            value = 50 + rand * 30 + season * 15
        elif variable is Variable.EVAPOTRANSPIRATION:
            value = rand * 4 + 2 + season * 2
        elif variable is Variable.RUNOFF:
            value = rand * 3 + season * 2
        else:
            return rand * 10

        return clamp(value, CLAMPS[variable])

    def _regional_value(
        self,
        variable: VariableKey,
        season: float,
        day_index: int,
        latitude: float
    ) -> float:
        """Value for one day using the latitude-aware formulas."""
        lat_factor = latitude_factor(latitude)
        variation = daily_variation(day_index)

        if variable is Variable.PRECIPITATION:
            value = self._rand() * 8 + season * 3 + variation
        elif variable is Variable.TEMPERATURE:
            base_temp = 20 - (lat_factor * 15) + season * 10
            value = base_temp + self._rand() * 10 - 5 + variation * 3
        elif variable is Variable.EVAPOTRANSPIRATION:
            value = self._rand() * 4 + 2 + season * 2 + lat_factor
        else:
            return self._value(variable, season)

        return clamp(value, CLAMPS[variable])
