"""Reach Map Server - FastMCP server that places a user network on a map.

Groups users by neighborhood and city, geocodes each location once through
OpenStreetMap Nominatim (rate limited, cached for the process lifetime) and
computes the map center, zoom and per-group display radius.

Usage:
    reach-map-server --country Brasil --country-code br
    GEOCODER_USER_AGENT="my-app/1.0 (me@example.com)" python -m reach_map_server
"""

from fastmcp import FastMCP

from .mcp_resources import register_resources
from .mcp_tools import register_tools
from .state import configure
from .telemetry import initialize_tracing

# Initialize tracing FIRST (before creating server)
# This is a no-op if TRACING_ENABLED is not set to 'true'
initialize_tracing()

# Initialize FastMCP server
mcp = FastMCP("Reach Map Server")

# Register tools and resources
register_tools(mcp)
register_resources(mcp)

_initialized = False


def initialize():
    """Initialize the server: configure the geocoder from env vars.

    Called automatically on first use or can be called explicitly.
    Safe to call multiple times.
    """
    global _initialized
    if _initialized:
        return
    configure()
    _initialized = True


__all__ = ["mcp", "initialize"]
