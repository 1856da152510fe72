"""Web adapters."""

from nmbs_departures.adapters.web.config_server import ConfigServer, create_app

__all__ = ["ConfigServer", "create_app"]
