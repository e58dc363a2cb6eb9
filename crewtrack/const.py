DOMAIN = "crewtrack"
VERSION = "0.3.0"

DEFAULT_BASE_PATH = "/api/realtime"

# Poll cadence and network bounds (milliseconds)
DEFAULT_POLL_INTERVAL_MS = 5000
REQUEST_TIMEOUT_MS = 8000          # applies to every call, polled or one-shot
PROBE_TIMEOUT = 15                 # seconds, connectivity HEAD probe

# Circuit breaker: ticks are skipped once this many failures accumulate
MAX_CONSECUTIVE_ERRORS = 3

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_MESSAGE_LIMIT = 50

# Event bus topics
TOPIC_CREW_LOCATIONS = "crew-locations"
TOPIC_ACTIVE_JOBS = "active-jobs"
TOPIC_DASHBOARD_STATS = "dashboard-stats"
TOPIC_ERROR = "error"

TOPICS = (TOPIC_CREW_LOCATIONS, TOPIC_ACTIVE_JOBS, TOPIC_DASHBOARD_STATS, TOPIC_ERROR)

# Crew status → marker colour
STATUS_COLORS: dict[str, str] = {
    "online":    "#10B981",
    "busy":      "#F59E0B",
    "available": "#3B82F6",
    "break":     "#8B5CF6",
    "emergency": "#EF4444",
    "offline":   "#6B7280",
}
DEFAULT_STATUS_COLOR = "#6B7280"

# Map-marker fields the locations endpoint does not provide yet; vehicle and
# wash type are always these defaults until /crew/locations returns them
DEFAULT_VEHICLE_TYPE = "car"
DEFAULT_SERVICE_TYPE = "basic"
DEFAULT_WASH_TYPE = "full"
DEFAULT_JOB_DURATION = 60          # minutes
DEFAULT_CREW_RATING = 4.5

EARTH_RADIUS_KM = 6371
