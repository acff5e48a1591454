"""Catalog browse domain and push stream."""

from kubesnap.controllers.catalog.builder import (
    CatalogBuilder,
    build_catalog_payload,
    parse_browse_scope,
    register_catalog_domains,
)
from kubesnap.controllers.catalog.provider import CatalogProvider, ProviderGetter
from kubesnap.controllers.catalog.router import create_catalog_stream_router
from kubesnap.controllers.catalog.streaming import CatalogStreamPublisher, encode_event

__all__ = [
    "CatalogBuilder",
    "CatalogProvider",
    "CatalogStreamPublisher",
    "ProviderGetter",
    "build_catalog_payload",
    "create_catalog_stream_router",
    "encode_event",
    "parse_browse_scope",
    "register_catalog_domains",
]
