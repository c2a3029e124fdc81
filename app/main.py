import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings
from app.evaluation.completion import CompletionService, GeminiCompletionClient
from app.evaluation.grid import ParameterRangeError
from app.router import router as api_router
from app.storage import ExperimentStore, build_store

logger = logging.getLogger(__name__)


def _default_completion(settings: Settings) -> CompletionService:
    if not settings.google_api_key:
        raise RuntimeError("GOOGLE_API_KEY not found in environment or .env file")
    return GeminiCompletionClient(
        settings.generation_model,
        api_key=settings.google_api_key,
        timeout_seconds=settings.request_timeout_seconds,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
    )


async def _parameter_range_handler(request: Request, exc: ParameterRangeError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ExperimentStore] = None,
    completion: Optional[CompletionService] = None,
) -> FastAPI:
    """Build the API with explicitly supplied collaborators.

    Anything not passed in is built from the environment (after load_dotenv)
    exactly once here. Serve with ``uvicorn app.main:create_app --factory``.
    """
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if store is None:
        store = build_store(settings)
    if completion is None:
        completion = _default_completion(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.store.close()

    app = FastAPI(title="LLM Parameter Explorer", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.completion = completion

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(ParameterRangeError, _parameter_range_handler)

    # Mount feature routers
    app.include_router(api_router)
    logger.info("API ready: storage=%s model=%s", type(store).__name__, settings.generation_model)
    return app
