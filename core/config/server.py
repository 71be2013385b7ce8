"""Server configuration constants."""

# Default port for the FastAPI session API
DEFAULT_API_PORT = 8000

# Maximum number of concurrently open sessions per server
DEFAULT_SESSION_LIMIT = 256

# Catches kept in the shared recent-catch feed
RECENT_CATCH_LIMIT = 20

# Sessions with no request for this long are closed when a new one opens
SESSION_IDLE_TIMEOUT_S = 600.0

# Longest stretch of time a request replays frame by frame; a longer wait
# is treated like a suspended tab
MAX_CATCH_UP_MS = 60_000.0
