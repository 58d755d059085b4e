"""MCP resource definitions for the reach map server."""

from .core import _get_cache_status, _get_config


def register_resources(mcp):
    """Register all MCP resources with the server."""

    @mcp.resource("reachmap://cache")
    def resource_cache() -> str:
        """Get geocoding cache statistics."""
        return "\n".join(f"{k}: {v}" for k, v in _get_cache_status().items())

    @mcp.resource("reachmap://config")
    def resource_config() -> str:
        """Get the active geocoder configuration."""
        return "\n".join(f"{k}: {v}" for k, v in _get_config().items())
