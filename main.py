from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.agents import build_content_generator
from app.api.v1.endpoints import interviews, resumes
from app.core.config import settings
from app.db.database import connect_to_database, close_database_connection
from app.services.question_cache import QuestionCache
from app.tools.file_uploader import LocalObjectStorage
from contextlib import asynccontextmanager
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    connect_to_database()
    yield
    app.state.question_cache.clear()
    close_database_connection()


def create_app() -> FastAPI:
    app = FastAPI(title="AI Interview API", version="0.1.0", lifespan=lifespan)

    # Process-scoped state shared by every request
    app.state.content_generator = build_content_generator(settings)
    app.state.question_cache = QuestionCache(
        max_size=settings.QUESTION_CACHE_SIZE,
        ttl_seconds=settings.QUESTION_CACHE_TTL_SECONDS,
    )
    app.state.storage = LocalObjectStorage(settings.STORAGE_ROOT, settings.STORAGE_BUCKET)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(resumes.router, prefix="/api", tags=["resumes"])
    app.include_router(interviews.router, prefix="/api", tags=["interviews"])

    # Mock object storage is served as static files
    app.mount(
        "/local_storage",
        StaticFiles(directory=settings.STORAGE_ROOT, check_dir=False),
        name="local_storage",
    )

    @app.get("/health", tags=["health"])
    async def health():
        """Health check endpoint returning service status."""
        return {"status": "ok", "contentGenerator": app.state.content_generator.name}

    logger.info(f"AI Interview API configured with '{app.state.content_generator.name}' content generator")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=3001, reload=True)
