import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from dal.catalog_dal import CatalogDAL
from routes.chat_route import router as chat_router
from routes.realtime_ws import router as realtime_router
from services.openai.chat_backend import OpenAIChatBackend
from services.realtime.session_store import SessionStore
from services.violet.backend import UnavailableBackend
from services.violet.context_assembler import ContextAssembler
from services.violet.intent_classifier import IntentClassifier
from services.violet.response_generator import ResponseGenerator
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import Settings, load_settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger().setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite catalog database (at DATABASE_DIR/catalog.db)
      - the OpenAI async client, when OPENAI_API_KEY is set
      - the session store, context assembler, response generator and intent classifier
    and attach them to `app.state`.
    """
    settings: Settings = app.state.settings

    db_initializer = AsyncDatabaseInitializer(settings.database_dir)
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    app.state.openai_client = None
    if settings.openai_api_key:
        try:
            app.state.openai_client = AsyncOpenAI(api_key=settings.openai_api_key)
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc
        backend = OpenAIChatBackend(
            app.state.openai_client,
            model=settings.openai_model,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
        )
    else:
        logging.warning("OPENAI_API_KEY is not set; Violet will answer with static fallback messages")
        backend = UnavailableBackend()

    app.state.session_store = SessionStore(unjoined_ttl=settings.session_join_ttl)
    app.state.context_assembler = ContextAssembler(CatalogDAL(db_initializer))
    app.state.response_generator = ResponseGenerator(
        backend,
        history_window=settings.history_window,
        timeout=settings.backend_timeout,
        trigger_codes=settings.admin_trigger_codes,
    )
    app.state.intent_classifier = IntentClassifier(backend, timeout=settings.backend_timeout)

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    logging.warning("Error while closing OpenAI client: %s", exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = settings or load_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(title="Violet Chat Relay", lifespan=lifespan)
    app.state.settings = settings

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies DB initializer and OpenAI client presence.
        """
        has_db = hasattr(request.app.state, "db_initializer")
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {"ok": True, "db_initialized": has_db, "openai_available": has_openai}

    # Register application routers
    app.include_router(chat_router)
    app.include_router(realtime_router)

    return app


app = create_app()
