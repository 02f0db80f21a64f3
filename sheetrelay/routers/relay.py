from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from sheetrelay.adapter import from_starlette
from sheetrelay.clients import Clients
from sheetrelay.models.common import StatusResponse
from sheetrelay.routes import ROUTES, RelayRoute
from sheetrelay.translator import cors_headers, to_starlette, translate

router = APIRouter(tags=["relay"])


def get_clients(request: Request) -> Clients:
    clients = request.app.state.clients
    if clients is None:
        raise RuntimeError("Remote clients were not initialized; start the app through its lifespan.")
    return clients


def _endpoint(route: RelayRoute):
    async def endpoint(request: Request, clients: Clients = Depends(get_clients)) -> Response:
        operation = await from_starlette(request)
        # Handlers make blocking Google API calls
        result = await run_in_threadpool(route.handler, operation, clients)
        return to_starlette(translate(result, route.cors_methods))

    endpoint.__name__ = route.name
    return endpoint


for _route in ROUTES:
    router.add_api_route(
        _route.path,
        _endpoint(_route),
        methods=[_route.method, "OPTIONS"],
        name=_route.name,
    )


@router.api_route("/", methods=["GET", "OPTIONS"])
def root(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers())
    status = StatusResponse(ok=True, message="Sheet relay for spreadsheet form handlers")
    return Response(content=status.model_dump_json(), media_type="application/json", headers=cors_headers())


@router.api_route("/_health", methods=["GET", "OPTIONS"])
def health(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers())
    return PlainTextResponse("ok", headers=cors_headers())
