from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def build_lifespan(ApplicationConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from src.depends import (
            AsyncSessionLocal,
            engine,
            get_credential_verifier,
            get_password_policy,
        )
        from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
        from src.api.utils.jwt import get_token_issuer
        from src.app.use_cases.account import AccountService

        if ApplicationConfig.CREATE_TABLES_ON_STARTUP:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        if ApplicationConfig.SEED_ADMIN_ON_STARTUP:
            async with AsyncSessionLocal() as session:
                credential_verifier = get_credential_verifier()
                uow = SqlAlchemyUnitOfWork(session, credential_verifier, get_password_policy())
                await AccountService(uow, credential_verifier, get_token_issuer()).create_admin()

        yield

    return lifespan


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(
        title="Account Service", version="0.1.0", lifespan=build_lifespan(ApplicationConfig)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import account, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(account.router, tags=["Account"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
