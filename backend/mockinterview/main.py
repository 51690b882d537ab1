from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mockinterview.api.routes import router
from mockinterview.config.settings import logger, CORS_ORIGINS
from mockinterview.dependencies import build_services
from mockinterview.exceptions import InterviewPrepError, LanguageModelError


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.services = build_services()
    logger.info("Backend services initialised")
    try:
        yield
    finally:
        app.state.services.close()


app = FastAPI(
    title="Mock interview api",
    version="1.0.0",
    docs_url="/swagger",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InterviewPrepError)
async def handle_app_error(request: Request, ex: InterviewPrepError):
    if isinstance(ex, LanguageModelError):
        logger.error(f"{request.method} {request.url.path} failed: {ex}")
        message = "Server error processing request"
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {ex}")
        message = ex.message
    return JSONResponse(
        status_code=ex.status_code,
        content={"status": ex.status_code, "message": message},
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, ex: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in ex.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": status.HTTP_400_BAD_REQUEST, "message": f"Invalid request: {errors}"},
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, ex: Exception):
    logger.exception(f"{request.method} {request.url.path} failed unexpectedly")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": status.HTTP_500_INTERNAL_SERVER_ERROR, "message": "Server error"},
    )


app.include_router(router)
