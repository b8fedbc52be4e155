from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime, timezone
from typing import Optional
import logging
import uvicorn
from .config import Settings, settings as default_settings
from .dependencies import Services, build_services
from .errors import install_error_handlers
from .middleware import logging_middleware
from .routers import devices, messages, webhooks


# Setup basic logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the relay app.

    When ``services`` is not given they are wired from ``settings`` on startup,
    so importing this module never touches Firebase or the database.
    """
    settings = settings or default_settings
    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(logging_middleware)
    install_error_handlers(app)

    app.include_router(devices.router, tags=["Devices"])
    app.include_router(messages.router, tags=["Messages"])
    app.include_router(webhooks.router, tags=["Webhooks"])

    @app.get("/")
    def root():
        return {"success": True, "message": f"{settings.PROJECT_NAME} running"}

    @app.get("/health")
    def health():
        return {
            "success": True,
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.on_event("startup")
    def start_services():
        if app.state.services is None:
            app.state.services = build_services(settings)
        session_factory = app.state.services.session_factory
        if session_factory is not None and settings.AUTO_CREATE_TABLES:
            from .database import Base
            from .models import device_token, webhook  # noqa: F401 register tables

            Base.metadata.create_all(bind=session_factory.kw["bind"])

    @app.on_event("shutdown")
    async def stop_services():
        if app.state.services is not None:
            # Let in-flight webhook deliveries finish before the loop goes away
            await app.state.services.fanout.aclose()

    return app


app = create_app()


def run():
    logger.info(f"Push relay running on port {default_settings.PORT}")
    logger.info(f"Health check: http://localhost:{default_settings.PORT}/health")
    uvicorn.run("push_relay.main:app", host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
