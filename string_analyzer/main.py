from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from string_analyzer import config
from string_analyzer.api.routes import router
from string_analyzer.exceptions import StringAnalyzerError
from string_analyzer.schemas import HealthResponse
from string_analyzer.store import StringStore, get_store

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"String store ready ({len(app.state.store)} records)")
    yield
    app.state.store.clear()
    logger.info("String store discarded")


def create_app(store: Optional[StringStore] = None) -> FastAPI:
    app = FastAPI(
        title=config.SERVICE_NAME,
        description="Analyze strings and query the stored results",
        version=config.VERSION,
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else StringStore()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, tags=["strings"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": config.SERVICE_NAME,
            "version": config.VERSION,
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/query?q=": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string",
                "GET /health": "Service health",
            }
        }

    @app.get("/health", response_model=HealthResponse)
    def health_check(store: StringStore = Depends(get_store)):
        """Health check endpoint"""
        return HealthResponse(status="healthy", stored=len(store))

    # Domain error handler
    @app.exception_handler(StringAnalyzerError)
    async def string_analyzer_error_handler(request: Request, exc: StringAnalyzerError):
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message}
        )

    # HTTPException handler (covers unknown routes and methods too)
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error"
            }
        )

    return app


app = create_app()


def run():
    import uvicorn
    uvicorn.run(
        "string_analyzer.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD,
    )


if __name__ == "__main__":
    run()
