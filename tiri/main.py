from contextlib import asynccontextmanager

from fastapi import FastAPI

from tiri.core.config import settings
from tiri.core.errors import register_error_handlers
from tiri.core.gatekeeper import EdgeGatekeeperMiddleware
from tiri.db.init_db import init_db
from tiri.routers import auth, events, guests, media, settings as studio_settings, templates


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(
    title="Tiri Studio Backend",
    version="1.0.0",
    lifespan=lifespan
)

register_error_handlers(app)

app.add_middleware(
    EdgeGatekeeperMiddleware,
    protected_prefixes=settings.PROTECTED_PREFIXES,
    login_path=settings.LOGIN_PATH,
)

app.include_router(auth.router)
app.include_router(templates.router)
app.include_router(events.router)
app.include_router(guests.router)
app.include_router(media.router)
app.include_router(studio_settings.router)


@app.get("/ping", tags=["Health"])
def ping():
    return {"status": "ok"}
