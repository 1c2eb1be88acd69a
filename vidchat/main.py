"""FastAPI application entry point.

Startup sequence: init LLM → init Qdrant → create chat engine. The engine is
built once here and shared read-only by every request.
"""

import os
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidchat.api.routes import router
from vidchat.engine.chat_engine import create_chat_engine
from vidchat.engine.llm_adapter import LLMAdapter
from vidchat.engine.qdrant_manager import QdrantManager

load_dotenv()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("startup.begin")

    llm_adapter = LLMAdapter()
    app.state.llm_adapter = llm_adapter
    logger.info("startup.llm_initialized", healthy=llm_adapter.is_healthy())

    qdrant = QdrantManager()
    app.state.qdrant = qdrant
    logger.info("startup.qdrant_initialized", healthy=qdrant.is_healthy())

    # Requests fail with 500 until keys are configured and the app restarts
    try:
        app.state.chat_engine = create_chat_engine(llm_adapter, qdrant)
        logger.info("startup.engine_created")
    except Exception as e:
        app.state.chat_engine = None
        logger.error("startup.engine_failed", error=str(e),
                     hint="Set CEREBRAS_API_KEY or GROQ_API_KEY in .env")

    logger.info("startup.complete")
    yield
    logger.info("shutdown.complete")


app = FastAPI(
    title="vidchat API",
    description="Streaming chat over YouTube video transcripts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ALLOWED_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
