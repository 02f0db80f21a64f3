"""Per-route serverless entry points.

Each function takes a Netlify/Lambda style event and returns a
``{statusCode, headers, body}`` mapping. Clients are built once per process
on first use and shared by every entry point.
"""

import logging
from functools import lru_cache
from typing import Any, Mapping

from sheetrelay.adapter import from_event
from sheetrelay.clients import Clients, build_clients
from sheetrelay.config import configure_logging, get_settings
from sheetrelay.exceptions import SheetRelayError
from sheetrelay.routes import ROUTES_BY_NAME
from sheetrelay.translator import to_event, translate, translate_error

logger = logging.getLogger(__name__)


@lru_cache
def get_clients() -> Clients:
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_clients(settings)


def handle_event(route_name: str, event: Mapping[str, Any], clients: Clients | None = None) -> dict:
    route = ROUTES_BY_NAME[route_name]
    try:
        request = from_event(event)
        result = route.handler(request, clients or get_clients())
        response = translate(result, route.cors_methods)
    except SheetRelayError as e:
        response = translate_error(e, route.cors_methods)
    except Exception as e:
        logger.exception("Unhandled error in %s", route_name)
        response = translate_error(e, route.cors_methods)
    return to_event(response)


def get_sheets(event, context=None) -> dict:
    return handle_event("get_sheets", event)


def get_sheet_data(event, context=None) -> dict:
    return handle_event("get_sheet_data", event)


def submit(event, context=None) -> dict:
    return handle_event("submit", event)


def update_sheet_row(event, context=None) -> dict:
    return handle_event("update_sheet_row", event)


def delete_sheet_row(event, context=None) -> dict:
    return handle_event("delete_sheet_row", event)


def log_form_change(event, context=None) -> dict:
    return handle_event("log_form_change", event)
