import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gestor.api.router import api_router
from gestor.core.config import get_settings
from gestor.core.errors import register_exception_handlers
from gestor.core.logging_config import setup_logging
from gestor.db.seed import seed_store
from gestor.db.store import store

settings = get_settings()
setup_logging(settings.log_level, settings.log_file or None)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.seed_demo_data and not store.list_users():
        seed_store(store)
        logger.info("Loaded demo data into the in-memory store")
    yield


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}
