"""Weather relay FastAPI application package."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from .api import api_router
from .core.config import Settings, settings as default_settings
from .core.errors import WeatherRelayError
from .core.logging_config import setup_logging
from .db.session import build_engine, init_db, wait_for_database
from .services.provider import OpenWeatherClient, WeatherGateway
from .services.weather import RefreshLocks


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    gateway: WeatherGateway | None = None,
) -> FastAPI:
    setup_logging()
    logger = logging.getLogger(__name__)
    settings = settings or default_settings
    logger.info("Initializing %s %s", settings.app_name, settings.app_version)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings.database_url)
    app.state.gateway = gateway or OpenWeatherClient(
        api_key=settings.openweather_api_key,
        url=settings.openweather_url,
        timeout=settings.openweather_timeout,
        units=settings.openweather_units,
    )
    app.state.refresh_locks = RefreshLocks()
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.exception_handler(WeatherRelayError)
    async def relay_error_handler(request: Request, exc: WeatherRelayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Provide a friendly landing response for the bare hostname."""

        return {
            "message": (
                "Weather relay is online. Try GET "
                f"{settings.api_prefix}/location/weather?city=Reno"
            )
        }

    @app.on_event("startup")
    def _bootstrap_database() -> None:
        if not settings.openweather_api_key:
            logger.warning("OPENWEATHER_API_KEY is not set; provider calls will be rejected")
        wait_for_database(
            app.state.engine,
            retries=settings.db_connect_retries,
            interval_seconds=settings.db_connect_interval_seconds,
        )
        init_db(app.state.engine)

    return app


app = create_app()
