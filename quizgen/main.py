# FastAPI entry point; wires routers, CORS and error handlers
# quizgen/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager

from quizgen.endpoints import (
    generate as generate_router,
    evaluate as evaluate_router,
)
from quizgen.utils.config import settings
from quizgen.utils.errors import register_exception_handlers
from quizgen.utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Quiz Generator API starting up...")
    logger.info(f"LLM provider: {settings.llm_provider}")
    # A missing key fails individual requests, not the startup.
    if not settings.provider_api_key():
        logger.warning(
            f"No API key configured for provider '{settings.llm_provider}'. "
            "Generation and evaluation requests will fail until it is set."
        )
    logger.info("Startup complete.")
    yield
    logger.info("Quiz Generator API shutting down...")

# --- FastAPI App Initialization ---
app = FastAPI(
    title="Quiz Generator API",
    description="Generates multiple-choice quizzes with a generative text model and evaluates answers.",
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(generate_router.router, prefix="/api", tags=["Generation"])
app.include_router(evaluate_router.router, prefix="/api", tags=["Evaluation"])

# --- Health Check ---
@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Hello from the Quiz Generator API!"

def run():
    """Console entry point: serves the app with uvicorn on the configured host/port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

if __name__ == "__main__":
    run()
