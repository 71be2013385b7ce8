"""Encounter timing constants.

Rates are expressed per nominal 60 fps frame (16.67 ms) and applied against
elapsed milliseconds, so animation speed does not depend on the real frame
rate.
"""

# Nominal frame length in milliseconds (60 fps)
FRAME_MS = 16.67

# Bobber flight time from cast to splash
THROW_DURATION_MS = 800.0

# Line depth units gained per nominal frame while sinking
SINK_SPEED = 2.0

# Line depth units recovered per nominal frame while reeling in
REEL_SPEED = 3.0

# Line depth units lost per tick while a broken-off line goes slack
SLACK_STEP = 3.0

# Depth at which the line stops sinking and waits for a bite
MAX_DEPTH = 200.0

# Delay between the line reaching bottom and the fish biting
BITE_DELAY_MS = 500.0

# Struggle animation phase advance per nominal frame
STRUGGLE_STEP = 0.3

# Gaps longer than this many frames are treated as a suspended tab
MAX_FRAME_GAP_FRAMES = 100

# Number of phase transitions kept for debugging
PHASE_HISTORY_LIMIT = 50

# Tolerance when comparing accumulated float depth against a bound
DEPTH_EPSILON = 1e-6
