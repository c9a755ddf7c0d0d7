from contextlib import asynccontextmanager

from fastapi import FastAPI

from auth import dependencies as auth_dependencies
from cashcards import router as cashcards_router
from core import db
from core.errors import install_exception_handlers
from core.logging import configure_logging


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="cashcard-api", lifespan=lifespan)
install_exception_handlers(app, authenticate=auth_dependencies.authenticate_request)

app.include_router(cashcards_router.router, tags=["cashcards"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "cashcard api"}
