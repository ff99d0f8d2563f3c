"""HTTP surface for the inventory catalog."""

from tindahan.api.catalog_server import create_app

__all__ = ["create_app"]
