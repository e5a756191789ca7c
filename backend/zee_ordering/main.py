import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from zee_ordering.api.access_gate import access_gate
from zee_ordering.api.health import router as health_router
from zee_ordering.api.routes_auth import router as auth_router
from zee_ordering.api.routes_catalogue import router as catalogue_router
from zee_ordering.api.routes_export import router as export_router
from zee_ordering.api.routes_import import router as import_router
from zee_ordering.api.routes_pages import router as pages_router
from zee_ordering.api.routes_upload import router as upload_router
from zee_ordering.config import VERSION, settings
from zee_ordering.db import init_db
from zee_ordering.services.upload_service import UPLOAD_SUBDIR
from zee_ordering.utils.logger import get_logger

log = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # RESET_DB=1 drops and recreates the tables
    init_db(reset=settings.RESET_DB)
    log.info("Zee Ordering backend started (version %s)", VERSION)
    yield
    log.info("Zee Ordering backend stopped")


app = FastAPI(title="Zee Ordering - Backend", version=VERSION, lifespan=lifespan)

# the gate is registered first so CORS wraps it and answers preflights itself
app.middleware("http")(access_gate)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(auth_router)

app.include_router(catalogue_router)

app.include_router(import_router)

app.include_router(upload_router)

app.include_router(export_router)

app.include_router(pages_router)

app.mount(
    f"/{UPLOAD_SUBDIR}",
    StaticFiles(directory=os.path.join(settings.PUBLIC_DIR, UPLOAD_SUBDIR), check_dir=False),
    name="uploads",
)
