import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skillstrong.core.config import settings
from skillstrong.core.database import init_db
from skillstrong.api import chat, conversations, featured, ingest, jobs, programs, research, user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )

    init_db()
    logger.info(f"{settings.app_name} started with LLM provider {settings.llm_provider!r}")

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and query params are client errors, reported as 400
    return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())})


app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(conversations.router, prefix="/api/conversations", tags=["conversations"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(programs.router, prefix="/api/programs", tags=["programs"])
app.include_router(featured.router, prefix="/api/featured", tags=["featured"])
app.include_router(research.router, prefix="/api", tags=["research"])
app.include_router(user.router, prefix="/api/user", tags=["user"])
app.include_router(ingest.router, prefix="/api", tags=["admin"])


@app.get("/api/health")
async def health():
    return {"status": "ok", "app": settings.app_name}
