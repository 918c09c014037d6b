import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from .config import LOG_LEVEL
from .errors import ExchangeError
from .services.database import create_db_and_tables
from .routers import profile, challenges, sent_challenges, preferences, rewards

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Defis")

origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ExchangeError)
async def exchange_error_handler(request: Request, exc: ExchangeError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "kind": exc.kind},
    )

# Lock waits and dropped connections; the client may retry the same request
@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError):
    logger.warning("Database unavailable on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=503,
        content={"detail": "Database temporarily unavailable", "retryable": True},
    )

@app.get("/")
async def root():
    return {"message": "Defis API"}

app.include_router(profile.router)
app.include_router(challenges.router)
app.include_router(sent_challenges.router)
app.include_router(preferences.router)
app.include_router(rewards.router)

@app.on_event("startup")
def on_startup():
    create_db_and_tables()
