# app/main.py
from fastapi import FastAPI
from app.api.error_handlers import register_error_handlers
from app.api.v1.routers import api_router
from app.core.config import settings
import logging
from dotenv import load_dotenv
load_dotenv(override=True) # Load environment variables from .env file, overriding existing ones

# Configure basic logging for the FastAPI app
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("fastapi_app")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_TITLE,
        description="REST facade over Google Cloud Storage and BigQuery",
        version="0.1.0",
    )

    app.include_router(api_router, prefix=settings.API_PREFIX)
    register_error_handlers(app)

    @app.get("/health", summary="Liveness probe")
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def startup_event():
        logger.info("FastAPI application starting up...")
        try:
            from app.core.dependencies import get_bigquery_client, get_storage_client

            get_storage_client()
            get_bigquery_client()
            logger.info("Cloud Storage and BigQuery clients initialized successfully on startup.")
        except Exception as e:
            logger.error(f"Failed to initialize cloud clients on startup: {e}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("FastAPI application shutting down...")

    return app


app = create_app()
