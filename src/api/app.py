"""FastAPI application factory that boots the vitals service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from api.routers import create_router
from api.schemas import TITLE, VERSION
from configs.settings import Settings
from security.gate import AccessDenied, AccessGate
from utils.logger.logger import Logger
from utils.logger_factory import EnhancedLoggerFactory, log_exception
from vitals.service import VitalsService


def _log_banner(logger: Logger, settings: Settings) -> None:
    server, security = settings.server, settings.security
    logger.info(f"vitals-glimpse listening on {server.bind}:{server.port}")
    if security.api_key is not None:
        logger.info("  API key: required")
    if security.allowed_networks:
        logger.info(f"  Allowed CIDRs: {', '.join(str(n) for n in security.allowed_networks)}")
    if security.rate_limit > 0:
        logger.info(f"  Rate limit: {security.rate_limit} req/min per IP")


async def _access_denied_handler(request: Request, exc: AccessDenied) -> PlainTextResponse:
    return PlainTextResponse(exc.reason, status_code=exc.status_code)


def create_app(
    settings: Settings,
    *,
    logger: Optional[Logger] = None,
    service: Optional[VitalsService] = None,
) -> FastAPI:
    """Build the app around one shared :class:`Settings` value.

    :param settings: Validated startup settings.
    :param logger: Application logger; built from ``settings.server`` if omitted.
    :param service: Pre-built vitals service; built at startup if omitted.
    :return: Configured FastAPI application.
    """
    if logger is None:
        logger = EnhancedLoggerFactory.create_application_logger(
            name="vitals",
            log_level=settings.server.log_level,
            base_dir=settings.server.log_dir,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await logger.start()
        try:
            if app.state.vitals_service is None:
                try:
                    app.state.vitals_service = VitalsService.build(settings.thresholds, logger)
                except Exception as e:
                    log_exception(logger, e, context="bootstrap")
                    raise
            _log_banner(logger, settings)
            yield
        finally:
            logger.info("vitals-glimpse shutdown")
            app.state.vitals_service = service
            await logger.shutdown()

    app = FastAPI(title=TITLE, version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.logger = logger
    app.state.vitals_service = service
    app.state.access_gate = AccessGate(settings.security, logger=logger)
    app.add_exception_handler(AccessDenied, _access_denied_handler)
    app.include_router(create_router())
    return app
