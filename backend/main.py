# backend/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import settings
from database import init_db
from utils.errors import ErrorBoundaryMiddleware, register_error_handlers
from utils.route_gate import RouteGateMiddleware

# Routers
from routes.auth import router as auth_router
from routes.pages import router as pages_router
from routes.inventory import router as inventory_router
from routes.materials import router as materials_router
from routes.projects import router as projects_router
from routes.categories import router as categories_router
from routes.units import router as units_router
from routes.inflows import router as inflows_router
from routes.outflows import router as outflows_router
from routes.users import router as users_router

STATIC_DIR = Path(__file__).resolve().parent / "static"


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
    yield


def create_app(enable_route_gate: bool = True) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Omnia Inventory API", version="1.0.0", lifespan=lifespan)

    # CORS Configuration
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    if settings.FRONTEND_URL:
        origins.append(settings.FRONTEND_URL)

    # Added last-to-first: the error boundary wraps the gate, which wraps CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if enable_route_gate:
        app.add_middleware(RouteGateMiddleware)
    app.add_middleware(ErrorBoundaryMiddleware)

    register_error_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Router registration
    app.include_router(auth_router)
    app.include_router(inventory_router)
    app.include_router(materials_router)
    app.include_router(projects_router)
    app.include_router(categories_router)
    app.include_router(units_router)
    app.include_router(inflows_router)
    app.include_router(outflows_router)
    app.include_router(users_router)
    app.include_router(pages_router)

    return app


app = create_app()
