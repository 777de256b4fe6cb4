import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__, models  # noqa: F401  (registers tables on Base)
from .config import settings
from .database import Base, engine
from .errors import NotFoundError, StorageError, ValidationError
from .routers import inventory, movements, products

logger = logging.getLogger(__name__)

app = FastAPI(title="Stock Ledger API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    logger.info("Starting Stock Ledger API (backend=%s)", settings.backend)
    if settings.backend == "sql":
        # create_all won't alter existing tables, it only adds missing ones.
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")
    else:
        logger.info("JSON data files: %s, %s", settings.products_file, settings.movements_file)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - also serves as health check."""
    return {"message": "Stock Ledger API", "status": "healthy"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Lightweight health probe endpoint."""
    return {"status": "healthy"}


app.include_router(products.router)
app.include_router(movements.router)
app.include_router(inventory.router)
