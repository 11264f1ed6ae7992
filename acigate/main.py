import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from acigate.config import get_settings
from acigate.exceptions import APIError, AuthenticationError, DecodeError, HTTPStatusError, TransportError
from acigate.logging_setup import setup_logging
from acigate.mcp_server import mcp
from acigate.routers.aci import router as aci_router


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="acigate", version="0.1.0")
api.include_router(aci_router)


# --- Exception handlers ---

@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error_code": "auth_error", "message": str(exc)})


@api.exception_handler(APIError)
async def apic_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=400, content={"error_code": f"apic_error_{exc.code}", "message": str(exc)})


@api.exception_handler(HTTPStatusError)
async def http_status_error_handler(request: Request, exc: HTTPStatusError):
    return JSONResponse(status_code=502, content={"error_code": "upstream_status", "message": str(exc)})


@api.exception_handler(TransportError)
@api.exception_handler(DecodeError)
async def connection_error_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=502, content={"error_code": "upstream_unreachable", "message": str(exc)})


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "acigate.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
