from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from college_portal.config import get_settings
from college_portal.infrastructure.database import SessionLocal, engine, initialize_database
from college_portal.infrastructure.notifications import build_dispatch_queue
from college_portal.interfaces.api.exception_handlers import register_exception_handlers
from college_portal.interfaces.api.routes import register_routes
from college_portal.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and run the email dispatch worker for the app's lifetime."""

    configure_logging()
    initialize_database()
    dispatch_queue = build_dispatch_queue(SessionLocal, get_settings())
    app.state.dispatch_queue = dispatch_queue
    await dispatch_queue.start()
    try:
        yield
    finally:
        await dispatch_queue.stop()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title=f"{settings.college_name} notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app
