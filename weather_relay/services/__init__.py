"""Service-layer utilities."""

from .accounts import AccountService
from .aggregation import StatsService, TemperatureFilter, TemperatureSeries
from .provider import OpenWeatherClient, ProviderReport
from .store import HistoryRow, LocationWeather, ReadingStore
from .weather import RefreshLocks, WeatherReport, WeatherService

__all__ = [
    "AccountService",
    "HistoryRow",
    "LocationWeather",
    "OpenWeatherClient",
    "ProviderReport",
    "ReadingStore",
    "RefreshLocks",
    "StatsService",
    "TemperatureFilter",
    "TemperatureSeries",
    "WeatherReport",
    "WeatherService",
]
