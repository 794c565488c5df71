"""Shipping domain API package."""

from shipping.api.errors import register_exception_handlers
from shipping.api.middleware import REQUEST_ID_HEADER, request_id_middleware
from shipping.api.routes import shipment_router

__all__ = ["shipment_router", "register_exception_handlers", "request_id_middleware", "REQUEST_ID_HEADER"]
