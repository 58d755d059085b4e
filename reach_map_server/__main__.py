"""Entry point for running the reach map server as a module.

Usage:
    python -m reach_map_server --country Brasil --country-code br
    reach-map-server --user-agent "my-app/1.0 (me@example.com)"
"""

import argparse
import os


def main():
    """Main entry point for the reach map MCP server."""
    parser = argparse.ArgumentParser(
        description="Reach Map MCP Server - Group and geocode users for map display",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reach-map-server
  reach-map-server -c Portugal -C pt --user-agent "my-app/1.0 (me@example.com)"

Environment variables:
  GEOCODER_ENDPOINT      Nominatim-compatible search URL
  GEOCODER_COUNTRY       Country name appended to queries (default: Brasil)
  GEOCODER_COUNTRY_CODE  ISO country code restriction (default: br)
  GEOCODER_USER_AGENT    User-Agent sent to the provider
  GEOCODER_MIN_DELAY     Seconds between provider requests (default: 1.0)
  GEOCODER_MAX_RETRIES   Retries on transport errors (default: 3)
  GEOCODER_BACKOFF       Initial retry backoff in seconds (default: 0.5)
  GEOCODER_TIMEOUT       Request timeout in seconds (default: 10)
""",
    )
    parser.add_argument(
        "--country",
        "-c",
        metavar="NAME",
        help="Country name appended to geocoding queries (or set GEOCODER_COUNTRY)",
    )
    parser.add_argument(
        "--country-code",
        "-C",
        metavar="CC",
        help="ISO 3166-1 alpha-2 country restriction (or set GEOCODER_COUNTRY_CODE)",
    )
    parser.add_argument(
        "--user-agent",
        "-u",
        metavar="UA",
        help="User-Agent for the geocoding provider (or set GEOCODER_USER_AGENT)",
    )
    args = parser.parse_args()

    # CLI args override env vars
    if args.country:
        os.environ["GEOCODER_COUNTRY"] = args.country
    if args.country_code:
        os.environ["GEOCODER_COUNTRY_CODE"] = args.country_code
    if args.user_agent:
        os.environ["GEOCODER_USER_AGENT"] = args.user_agent

    # Import and initialize AFTER setting env vars
    from . import initialize, mcp

    initialize()
    mcp.run()


if __name__ == "__main__":
    main()
