from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routes import tasks
from app.config import settings
from app.db.models import Base
from app.db.session import engine
from app.logging_config import setup_logging

__all__ = ["__version__", "app"]

__version__ = "0.1.0"

setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # start
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # shutdown
    await engine.dispose()


app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
app.include_router(tasks.router, prefix=settings.api_prefix)
register_exception_handlers(app)


@app.get("/healthz", tags=["health"])
async def health_check() -> dict:
    return {"status": "ok"}
