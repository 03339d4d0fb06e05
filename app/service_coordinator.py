import logging
import os

from contextlib import asynccontextmanager
from fastapi import APIRouter, FastAPI, HTTPException, Request, status, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .internal.db.connection import connect_client, disconnect_client
from .internal.logging.logging_middleware import TimingMiddleware
from .internal.schemas import PROD_ENVIRONMENT, TESTING_ENVIRONMENT

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests run against the in-memory database client.
    if os.environ.get("ENVIRONMENT") == TESTING_ENVIRONMENT:
        yield
        return

    await connect_client(app)
    logging.info("Connected to the database.")
    yield
    await disconnect_client(app)
    logging.info("Disconnected from the database.")

class HSTSMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            response: Response = await call_next(request)
        except Exception as e:
            logging.error(f"Unhandled exception in middleware: {e}")
            return JSONResponse(
                {"error": "Internal server error in middleware."},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"
        return response

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = {"error": str(exc.detail.get("error", "")), **exc.detail}
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"error": "Invalid request payload", "details": jsonable_errors(exc)},
        status_code=status.HTTP_400_BAD_REQUEST
    )

def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"location": ".".join(str(part) for part in error.get("loc", [])), "message": error.get("msg")}
        for error in exc.errors()
    ]

class EndpointServiceCoordinator:

    default_origins = [
        # localhost
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    def __init__(self, routers, environment):
        is_prod_environment = environment == PROD_ENVIRONMENT
        openapi_url = "/openapi.json" if not is_prod_environment else None
        docs_url = "/docs" if not is_prod_environment else None
        redoc_url = "/redoc" if not is_prod_environment else None
        self.app = FastAPI(lifespan=lifespan,
                           title="MindAI API Service",
                           openapi_url=openapi_url,
                           docs_url=docs_url,
                           redoc_url=redoc_url)
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self._allowed_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self.app.add_middleware(TimingMiddleware)
        self.app.add_middleware(HSTSMiddleware)
        self.app.add_exception_handler(StarletteHTTPException, http_exception_handler)
        self.app.add_exception_handler(RequestValidationError, validation_exception_handler)
        self.environment = environment

        @self.app.get("/", tags=["health"])
        async def health_check():
            return {"status": "ok"}

        try:
            assert len(routers) > 0, "Did not receive any routers"

            for router in routers:
                assert type(router) is APIRouter, "Received invalid object instead of router"
                self.app.include_router(router)

        except Exception as e:
            raise HTTPException(detail=str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    def _allowed_origins(self) -> list[str]:
        configured_origins = os.environ.get("ALLOWED_ORIGINS")
        if len(configured_origins or '') == 0:
            return self.default_origins
        return [origin.strip() for origin in configured_origins.split(",") if len(origin.strip()) > 0]
