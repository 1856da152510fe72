"""Device transport adapters."""

from nmbs_departures.adapters.transport.websocket_transport import WebSocketDeviceTransport

__all__ = ["WebSocketDeviceTransport"]
