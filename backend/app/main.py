from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from backend.app.config import AppConfig
from backend.app.api.routes_cred import router as cred_router
from backend.app.api.routes_graph import router as graph_router
from backend.app.dependencies import get_cred_service

from credgraph.errors import CredGraphError, InvalidParameterError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle hooks.

    Loads the graph and computes the initial cred once at startup,
    and stops the reanalysis worker at shutdown.
    """
    service = get_cred_service()

    yield

    service.session.shutdown()


async def _invalid_parameter(request: Request, exc: InvalidParameterError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _cred_graph_error(request: Request, exc: CredGraphError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_name,
        lifespan=lifespan,
    )

    app.add_exception_handler(InvalidParameterError, _invalid_parameter)
    app.add_exception_handler(CredGraphError, _cred_graph_error)

    app.include_router(
        cred_router,
        prefix=f"{config.api_prefix}/cred",
        tags=["cred"],
    )

    app.include_router(
        graph_router,
        prefix=f"{config.api_prefix}/graph",
        tags=["graph"],
    )

    return app


config = AppConfig()
app = create_app(config)
