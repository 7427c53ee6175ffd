import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
ENV_FILE = ROOT_DIR / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from fastapi.staticfiles import StaticFiles  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from sentimentbr.api.routers import analyses, analyze, export, health, realtime, spring  # noqa: E402
from sentimentbr.api.schemas.common import Msg  # noqa: E402
from sentimentbr.core.config import Settings, get_settings  # noqa: E402
from sentimentbr.core.errors import ClassificationError  # noqa: E402
from sentimentbr.realtime.notifier import Notifier  # noqa: E402
from sentimentbr.sentiment.llm_router import llm_router  # noqa: E402
from sentimentbr.storage.store import JsonSentimentStore  # noqa: E402

logging.basicConfig(level=get_settings().LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def _error(status: int, msg: Msg, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status, content=msg.model_dump(exclude_none=True), headers=headers)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
                  for e in exc.errors()]
        on_text = any(e["loc"][:2] == ["body", "text"] for e in errors)
        message = "Texto inválido" if on_text else "Dados inválidos"
        return _error(400, Msg(message=message, errors=errors))

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, Msg(message=str(exc.detail)), headers=getattr(exc, "headers", None))

    @app.exception_handler(ClassificationError)
    async def _classification(request: Request, exc: ClassificationError):
        logger.error(f"❌ sentiment analysis failed: {exc}")
        return _error(500, Msg(message="Erro ao processar a análise de sentimento", error=str(exc)))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception(f"unexpected error on {request.method} {request.url.path}")
        return _error(500, Msg(message="Erro interno do servidor"))


def create_app(settings: Optional[Settings] = None, classifier=None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 starting sentimentbr...")
        app.state.store = JsonSentimentStore(settings.data_path)
        app.state.notifier = Notifier()
        app.state.classifier = classifier or llm_router
        yield
        logger.info("🛑 stopping sentimentbr...")

    app = FastAPI(title="EcoBit - Análise de Sentimentos", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_methods=["*"], allow_headers=["*"], allow_credentials=True,
    )
    _install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(analyze.router)
    app.include_router(analyses.router)
    app.include_router(export.router)
    app.include_router(spring.router)
    app.include_router(realtime.router)

    # dashboard at "/", mounted last so API routes win
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="dashboard")
    return app


app = create_app()
