"""
Point d'entrée principal de l'API locale Updock.
Démarrage : uvicorn updock.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

import updock.models  # noqa: F401  (enregistre tous les modèles dans Base.metadata avant les routers)
from updock.config import settings
from updock.container import build_services
from updock.database import init_db
from updock.routers import admin, auth, favorites, offline, preferences, spots
from updock.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : construit les services, démarre et arrête le scheduler APScheduler."""
    logging.getLogger("updock").setLevel(settings.LOG_LEVEL)
    if settings.ENV == "development":
        try:
            init_db()
        except SQLAlchemyError as e:
            logger.error("Création des tables impossible : %s", e)
    services = build_services(settings)
    app.state.services = services
    start_scheduler(services)
    yield
    stop_scheduler()


app = FastAPI(
    title="Updock API",
    description="Spots de dockstart : carte, favoris hors-ligne, soumissions et modération",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : autorise l'app web / Capacitor servie en local (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=["capacitor://localhost", "http://localhost"],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(spots.router)
app.include_router(favorites.router)
app.include_router(admin.router)
app.include_router(offline.router)
app.include_router(preferences.router)

# Photos stockées localement (STORAGE_BACKEND=local), servies sous PUBLIC_BASE_URL
if settings.STORAGE_BACKEND == "local":
    app.mount("/storage", StaticFiles(directory=settings.STORAGE_DIR, check_dir=False), name="storage")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check(request: Request):
    """Vérifie que l'API est opérationnelle."""
    services = getattr(request.app.state, "services", None)
    return {
        "status": "ok",
        "service": "Updock API",
        "version": "0.1.0",
        "spots_loading": services.synchronizer.loading if services else True,
    }
