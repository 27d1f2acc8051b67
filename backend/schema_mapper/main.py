"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schema_mapper.config import get_settings
from schema_mapper.mapping.compatibility import STORAGE_TYPE_COMPATIBILITY
from schema_mapper.routers import validation

logger = logging.getLogger(__name__)

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(
        "Starting %s with %d known storage types",
        settings.app_name,
        len(STORAGE_TYPE_COMPATIBILITY),
    )
    yield


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(validation.router, tags=["validation"])


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}
