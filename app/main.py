import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.credits import credit_costs
from app.errors import ConfigurationError, GatewayError
from app.routes import router

logger = logging.getLogger("novi.main")


# --- App setup ---

@asynccontextmanager
async def lifespan(_: FastAPI):
    load_dotenv()
    if not settings.fal_key():
        logger.warning("FAL_KEY or FAL_API_KEY not found in environment variables")
    try:
        credit_costs()
    except ConfigurationError as exc:
        logger.error("Refusing to start: %s", exc.message)
        raise
    yield


app = FastAPI(title="Novi AI", lifespan=lifespan)


@app.exception_handler(GatewayError)
async def gateway_error_handler(_request: Request, exc: GatewayError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, **exc.extra()},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body: %s", exc.errors())
    return JSONResponse(status_code=400, content={"success": False, "error": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": error})


@app.exception_handler(Exception)
async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Something went wrong!"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in (settings.get("CORS_ORIGINS") or "*").split(",")],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "message": "Server is running"}


app.include_router(router)
