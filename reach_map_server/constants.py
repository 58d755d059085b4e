"""Constants for location resolution and map viewport calculation."""

# Geocoding provider defaults (OpenStreetMap Nominatim)
DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/search"
DEFAULT_COUNTRY = "Brasil"
DEFAULT_COUNTRY_CODE = "br"
DEFAULT_USER_AGENT = "reach-map-server/0.1"

# Nominatim usage policy: at most 1 request per second
DEFAULT_MIN_DELAY_SECONDS = 1.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 0.5
DEFAULT_TIMEOUT_SECONDS = 10.0

# HTTP statuses that are worth retrying
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Address keys in a Nominatim answer that indicate neighborhood-level precision
NEIGHBORHOOD_ADDRESS_KEYS = ("suburb", "neighbourhood", "quarter", "city_district")

# Padding (degrees) around a neighborhood point to build its bounds box
NEIGHBORHOOD_BOUNDS_PADDING = 0.01

# Viewport defaults
DEFAULT_CENTER = (-15.7797, -47.9297)  # Brazil national centroid (Brasilia)
DEFAULT_ZOOM = 4  # Whole country
CLOSE_ZOOM = 14  # Single location, also used to focus on a group
REGIONAL_ZOOM = 12  # Several locations
USER_FOCUS_ZOOM = 16  # Focus on one user

# Display radius per granularity (meters)
NEIGHBORHOOD_RADIUS_M = 300
CITY_RADIUS_M = 1500

# Placeholder coordinates for groups that have not been resolved
SENTINEL_COORDINATES = (0.0, 0.0)

# Granularity values
GRANULARITY_NEIGHBORHOOD = "neighborhood"
GRANULARITY_CITY = "city"
GRANULARITY_UNKNOWN = "unknown"
