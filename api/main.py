import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admin import router as admin_router
from auth import router as auth_router
from contact import router as contact_router
from core import config, errors
from core.db import Database, close_quietly
from projects import router as projects_router
from segments import router as segments_router
from users import router as users_router

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process; closed when uvicorn stops (SIGINT/SIGTERM).
    db = Database()
    await db.connect()
    app.state.db = db
    try:
        yield
    finally:
        await close_quietly(db)


def create_app() -> FastAPI:
    app = FastAPI(title="triforge-api", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    errors.install(app)

    app.include_router(auth_router.router, prefix="/api", tags=["auth"])
    app.include_router(projects_router.router, prefix="/api", tags=["projects"])
    app.include_router(segments_router.router, prefix="/api", tags=["segments"])
    app.include_router(contact_router.router, prefix="/api", tags=["contact"])
    app.include_router(admin_router.router, prefix="/api", tags=["admin"])
    app.include_router(users_router.router, prefix="/api", tags=["users"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"status": "ok", "message": "triforge api running (PostgreSQL + Auth + Projects + Contact)"}

    return app


app = create_app()
