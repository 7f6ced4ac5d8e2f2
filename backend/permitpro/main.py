import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from permitpro.config import settings
from permitpro.errors import PermitProError
from permitpro.routers import auth, permits, documents, contractors, subcontractors, checklists
from permitpro.services.document_service import get_upload_full_path

logger = logging.getLogger("permitpro")


def configure_logging():
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Startup: create the schema if needed and integrity-check the database
    try:
        from permitpro.database import init_db
        from permitpro.utils.filesystem import ensure_data_dirs
        ensure_data_dirs()
        init_db()
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
        if result and result[0] == "ok":
            logger.info("Database integrity check passed.")
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    except (OSError, sqlite3.Error) as exc:
        logger.error("Could not initialise database at %s: %s", settings.db_path, exc)
    yield


app = FastAPI(
    title="PermitPro",
    description="Permit package tracking for construction-permit workflows",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PermitProError)
async def permitpro_error_handler(request: Request, exc: PermitProError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, **exc.details},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(permits.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(contractors.router, prefix=settings.api_prefix)
app.include_router(subcontractors.router, prefix=settings.api_prefix)
app.include_router(checklists.router, prefix=settings.api_prefix)


@app.get("/uploads/{file_path:path}")
async def serve_upload(file_path: str):
    uploads_dir = settings.uploads_dir.resolve()
    full_path = get_upload_full_path(file_path, uploads_dir).resolve()
    if uploads_dir not in full_path.parents or not full_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path=str(full_path))


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
