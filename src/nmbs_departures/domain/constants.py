"""Constants fixed by the contract with the device side."""

# Delay before a coalesced search request is executed
DEBOUNCE_DELAY_MS = 500

# Device-side array sizes
MAX_DEPARTURES = 11
MAX_FAVORITE_STATIONS = 6

# Device-side string buffer sizes (characters, excluding terminator)
DESTINATION_MAX_LENGTH = 31
PLATFORM_MAX_LENGTH = 3
TRAIN_TYPE_MAX_LENGTH = 7
DURATION_MAX_LENGTH = 7
CLOCK_MAX_LENGTH = 7
STATION_NAME_MAX_LENGTH = 31
VEHICLE_MAX_LENGTH = 15
DIRECTION_MAX_LENGTH = 31
CONFIG_STATION_NAME_MAX_LENGTH = 63
CONFIG_STATION_ID_MAX_LENGTH = 31

# Detail fetches start this many minutes before the selected departure
DETAIL_WINDOW_LEAD_MINUTES = 10

# Older watch builds send station names instead of iRail ids
LEGACY_STATION_IDS = {
    "Brussels-Central": "BE.NMBS.008813003",
    "Antwerp-Central": "BE.NMBS.008821006",
    "Ghent-Sint-Pieters": "BE.NMBS.008892007",
    "Liège-Guillemins": "BE.NMBS.008841004",
    "Leuven": "BE.NMBS.008833001",
}

SUPPORTED_LANGUAGES = ("en", "nl", "fr", "de")
DEFAULT_LANGUAGE = "en"
