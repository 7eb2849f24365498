import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text

from auditions.config import get_settings
from auditions.api import auth, panel, admin, leaderboard
from auditions.custom_logging import configure_logging
from auditions.databases.database import engine
from auditions.utils.response import create_response
import auditions.databases.model as models

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Audition evaluation service: panels score contestants with AI-suggested
    criteria and questions, admins monitor progress, the public sees the leaderboard.
    """,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

@app.on_event("startup")
def on_startup() -> None:
    """Create tables when the app starts."""
    logging.info("App startup: ensuring database tables exist")
    try:
        models.Base.metadata.create_all(bind=engine)
    except Exception as e:
        logging.error(f"Failed to create tables on startup: {e}")
        raise

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=400,
        content=create_response(False, "Request invalid", None, {"detail": exc.errors()})
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content=create_response(False, exc.detail, None, None)
    )

app.include_router(auth.router, tags=["Auth"], prefix="/api/v1")
app.include_router(panel.router, tags=["Panel"], prefix="/api/v1")
app.include_router(admin.router, tags=["Admin"], prefix="/api/v1")
app.include_router(leaderboard.router, tags=["Leaderboard"], prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": "Audition Evaluation Server running..."}

@app.get("/health", tags=["Health"])
async def health_check():
    """Health Check Endpoint"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        database = "up"
    except Exception as e:
        logging.error(f"Database health check failed: {e}")
        database = "down"

    return {
        "status": "healthy" if database == "up" else "unhealthy",
        "services": {
            "api": "up",
            "database": database,
        },
    }
