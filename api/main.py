"""FastAPI application - RPC ingress for the conference app"""
from typing import Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from application.dispatcher.request_dispatcher import RequestDispatcher
from application.dispatcher.rpc_request import RpcRequest
from application.ports.logger import LoggerPort
from application.ports.session_resolver import SessionResolverPort
from application.procedures.system import build_system_router
from application.router.procedure_router import ProcedureRouter
from infrastructure.config.env_settings import RpcSettings
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.sessions.dict_session_resolver import DictSessionResolver


def _build_logger(settings: RpcSettings) -> LoggerPort:
    if settings.log_backend == "loguru":
        logger: LoggerPort = LoguruLogger()
    elif settings.log_backend == "both":
        logger = CompositeLogger([ConsoleLogger(), LoguruLogger()])
    else:
        logger = ConsoleLogger()
    return logger.bind(service=settings.service_name)


def _build_router(settings: RpcSettings) -> ProcedureRouter:
    root = ProcedureRouter()
    root.mount("system", build_system_router(settings.service_name))
    return root


def _is_batch(request: Request) -> bool:
    return request.query_params.get("batch") in ("1", "true")


async def _read_raw_input(request: Request) -> Union[str, bytes, None]:
    if request.method == "GET":
        return request.query_params.get("input")
    body = await request.body()
    return body or None


def create_app(
    settings: Optional[RpcSettings] = None,
    router: Optional[ProcedureRouter] = None,
    logger: Optional[LoggerPort] = None,
    session_resolver: Optional[SessionResolverPort] = None,
) -> FastAPI:
    settings = settings or RpcSettings.from_env()
    setup_console_logging(level=settings.log_level)

    dispatcher = RequestDispatcher(
        router=router if router is not None else _build_router(settings),
        logger=logger or _build_logger(settings),
        session_resolver=session_resolver or DictSessionResolver(),
        allow_batching=settings.allow_batching,
        max_batch_size=settings.max_batch_size,
    )

    app = FastAPI(
        title="Cloud Native Days RPC",
        description="Procedure endpoint for the conference application",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    @app.get("/")
    def read_root():
        """Health check"""
        return {"status": "ok", "service": settings.service_name}

    @app.api_route(f"{settings.endpoint}/{{path:path}}", methods=["GET", "POST"])
    async def handle_rpc(path: str, request: Request) -> JSONResponse:
        rpc_request = RpcRequest(
            method=request.method,
            path=path,
            raw_input=await _read_raw_input(request),
            is_batch=_is_batch(request),
            headers=dict(request.headers),
        )
        response = await dispatcher.dispatch(rpc_request)
        return JSONResponse(status_code=response.status, content=response.body)

    return app


app = create_app()
