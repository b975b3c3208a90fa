import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from SharedStore.exc.base import BaseErrorCode
from SharedStore.managers import FailoverRepository
from SharedStore.middlewares import RequestLogMiddleware
from agroguard.config import Settings, init_settings
from agroguard.database import create_record_manager
from agroguard.exceptions import (
    CatalogErrorCode, CatalogValidationError, InvalidTransitionError, PersistenceError,
    AnalysisErrorCode, AnalysisInputError,
)
from agroguard.routers.v1 import diseases, categories, chemicals, markets, pending, comments, analysis
from agroguard.services.analysis import AnalysisOrchestrator, build_orchestrator
from agroguard.services.catalog import Catalog

logger = logging.getLogger(__name__)


def error_response(status_code: int, error_enum: BaseErrorCode, headers=None, **kwargs) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error_enum.message.format(**kwargs), "code": error_enum.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI, settings: Settings):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict):
            content = {"success": False, "error": exc.detail.get("message"), "code": exc.detail.get("code")}
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        detail = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'] if loc != 'body') or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        return error_response(400, CatalogErrorCode.VALIDATION, detail=detail)

    @app.exception_handler(CatalogValidationError)
    async def catalog_validation_handler(request: Request, exc: CatalogValidationError):
        return error_response(400, CatalogErrorCode.VALIDATION, detail=str(exc))

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        return error_response(400, CatalogErrorCode.INVALID_TRANSITION, detail=str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error(f"❌ {exc}")
        return error_response(500, CatalogErrorCode.PERSIST_FAILED, action=exc.action, entity=exc.entity)

    @app.exception_handler(AnalysisInputError)
    async def analysis_input_handler(request: Request, exc: AnalysisInputError):
        return error_response(400, AnalysisErrorCode.INVALID_IMAGE, detail=str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
        if settings.is_dev:
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": str(exc), "code": CatalogErrorCode.INTERNAL.code},
            )
        return error_response(500, CatalogErrorCode.INTERNAL)


def create_app(
    settings: Settings = None,
    *,
    catalog: Catalog = None,
    orchestrator: AnalysisOrchestrator = None,
) -> FastAPI:
    """
    Build the REST fallback service.

    The service keeps its records in the SQL store and serves them without a
    fallback of its own. ``catalog`` and ``orchestrator`` may be injected.
    """
    settings = settings or init_settings()
    store = create_record_manager(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DEBUG)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_STR}/openapi.json"
    )
    app.state.settings = settings
    app.state.store = store
    app.state.catalog = catalog or Catalog(FailoverRepository(store))
    app.state.orchestrator = orchestrator or build_orchestrator(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGIN.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.is_dev:
        app.add_middleware(RequestLogMiddleware)

    register_exception_handlers(app, settings)

    @app.on_event("startup")
    async def startup():
        if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
            Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
        await store.init_db()
        logger.info(f"🚀 {settings.PROJECT_NAME} ready ({settings.ENV_MODE})")

    @app.on_event("shutdown")
    async def shutdown():
        await store.engine.dispose()

    api = settings.API_STR
    app.include_router(diseases.router, prefix=f"{api}/diseases", tags=["diseases"])
    app.include_router(categories.router, prefix=f"{api}/disease-categories", tags=["disease-categories"])
    app.include_router(chemicals.router, prefix=f"{api}/chemicals", tags=["chemicals"])
    app.include_router(markets.router, prefix=f"{api}/markets", tags=["markets"])
    app.include_router(pending.router, prefix=f"{api}/pendingDiseases", tags=["pending-diseases"])
    app.include_router(pending.router, prefix=f"{api}/pending-diseases", include_in_schema=False)
    app.include_router(comments.router, prefix=f"{api}/comments", tags=["comments"])
    app.include_router(analysis.router, prefix=api, tags=["analysis"])

    @app.get("/")
    async def read_index():
        return {"message": f"{settings.PROJECT_NAME} is running"}

    @app.get("/health")
    async def health_check():
        orchestrator = app.state.orchestrator
        return {
            "status": "healthy",
            "environment": settings.ENV_MODE,
            "remoteAnalysis": orchestrator.remote is not None,
            "simulatorOnly": not orchestrator.remote_enabled,
        }

    return app
