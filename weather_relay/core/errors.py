"""Error taxonomy surfaced at the request boundary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class WeatherRelayError(Exception):
    message: str
    status_code: int = 500

    def __str__(self) -> str:  # pragma: no cover - human-friendly
        return self.message


class StorageError(WeatherRelayError):
    """Any persistence failure. Not retried by the relay."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=500)


class ProviderError(WeatherRelayError):
    """Upstream weather service failed or answered with a non-200 code."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message=message or "failed to communicate with the openweather api: unknown reason",
            status_code=502,
        )


class InvalidFilterError(WeatherRelayError):
    """Caller sent a city or statistics filter the relay cannot serve."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=400)


class NotFoundError(WeatherRelayError):
    """Lookup matched nothing. Rendered as a message, not a failure status."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=200)


__all__ = [
    "WeatherRelayError",
    "StorageError",
    "ProviderError",
    "InvalidFilterError",
    "NotFoundError",
]
