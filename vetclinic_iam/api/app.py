from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    body = exc.body()
    logger.warning(f"Client error on {request.url.path}: {body['error']}")
    return JSONResponse(status_code=exc.status_code, content=body)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error on {request.url.path}: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def handle_store_error(request: Request, exc: SQLAlchemyError):
    # Infrastructure failure: surfaced generically so the caller can back off and retry
    logger.error(f"Store error on {request.url.path}: {exc.__class__.__name__}")
    error_dict = {"code": "STORE_UNAVAILABLE", "message": "Service temporarily unavailable"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.AUTO_CREATE_TABLES:
            from vetclinic_iam.depends import engine

            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield

    app = FastAPI(title="Vet Clinic IAM", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from vetclinic_iam.api.routes import accounts, admin, auth, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(accounts.router, tags=["Accounts"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)

    return app
