"""Quick-time-event constants."""

# Keys drawn for desktop challenges
QTE_KEYS = ("A", "S", "D", "W", "E", "Q", "R", "F")

# Screen-relative (percent) centres for touch challenges: corners, edges, centre line
TAP_LOCATIONS = (
    (20.0, 30.0),
    (80.0, 30.0),
    (20.0, 70.0),
    (80.0, 70.0),
    (50.0, 20.0),
    (50.0, 80.0),
)

# Countdown cadence and decrement
QTE_COUNTDOWN_INTERVAL_MS = 100.0
QTE_COUNTDOWN_STEP_S = 0.1

# Pause between a cleared challenge and the next prompt
QTE_REPROMPT_DELAY_MS = 200.0

# Rendered tap target edge length in pixels
TAP_TARGET_SIZE = 72

# Keys never treated as challenge input (reserved for casting)
RESERVED_KEYS = frozenset({" ", "SPACE"})

# Timer bar thresholds (fraction of time remaining)
QTE_WARNING_FRACTION = 0.6
QTE_DANGER_FRACTION = 0.3
