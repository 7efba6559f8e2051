"""Tracking defaults and location protocol constants."""

# Geometry
EARTH_RADIUS_M = 6_371_000.0

# Route filtering
DEFAULT_MIN_DISTANCE_M = 1.0

# Marker animation
DEFAULT_ANIMATION_DURATION_MS = 800

# Viewport follow mode
DEFAULT_ZOOM_DELTA = 0.01

# Initial map region used until the first fix arrives
DEFAULT_CENTER_LAT = 37.78825
DEFAULT_CENTER_LON = -122.4324

# The polyline is only drawn once the route has more points than this
DEFAULT_POLYLINE_MIN_POINTS = 10

# Provider request defaults
DEFAULT_DISTANCE_FILTER_M = 0.0
DEFAULT_INTERVAL_MS = 4000
DEFAULT_FASTEST_INTERVAL_MS = 3000
DEFAULT_READ_ONCE_TIMEOUT_S = 30.0

# Provider error codes (W3C Geolocation numbering)
ERROR_PERMISSION_DENIED = 1
ERROR_POSITION_UNAVAILABLE = 2
ERROR_TIMEOUT = 3

# User-facing error messages
MSG_PERMISSION_DENIED = "Location permission denied."
MSG_SERVICE_DISABLED = "Location services disabled."

# Remediation prompt texts
PROMPT_ALLOW_TITLE = "Allow Location"
PROMPT_ALLOW_MESSAGE = "Open Settings to allow location services"
PROMPT_ENABLE_TITLE = "Enable Location"
PROMPT_ENABLE_MESSAGE = "Open Settings to enable location services"

# Permission capability requested from the platform
LOCATION_CAPABILITY = "ACCESS_FINE_LOCATION"

# NMEA serial defaults
DEFAULT_SERIAL_PORT = "/dev/serial0"
DEFAULT_BAUD_RATE = 9600
