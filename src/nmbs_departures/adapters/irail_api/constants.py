"""Constants for the iRail API adapter.

API Documentation: https://docs.irail.be/
No authentication required; clients must identify themselves with a
descriptive User-Agent.
"""

IRAIL_BASE_URL = "https://api.irail.be"
IRAIL_CONNECTIONS_URL = f"{IRAIL_BASE_URL}/connections/"  # GET ?from=..&to=..
IRAIL_STATIONS_URL = f"{IRAIL_BASE_URL}/v1/stations"

DEFAULT_USER_AGENT = "WerknaamCommuter <https://werknaam.be, commuter@werknaam.be>"

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# iRail date/time query formats for a departure window
IRAIL_DATE_FORMAT = "%d%m%y"
IRAIL_TIME_FORMAT = "%H%M"
