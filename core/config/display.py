"""Display and UI configuration constants."""

# Screen dimensions in pixels
SCREEN_WIDTH = 1088
SCREEN_HEIGHT = 612

# The frame rate for the game loop, in frames per second
FRAME_RATE = 60

# Horizon line as a fraction of screen height
HORIZON_RATIO = 0.45

# Beach occupies the left part of the screen
SHORE_WIDTH = 260

# Colors
SKY_COLOR = (135, 190, 235)
WATER_COLOR = (30, 110, 170)
DEEP_WATER_COLOR = (15, 60, 110)
SAND_COLOR = (222, 196, 140)
LINE_COLOR = (235, 235, 235)
BOBBER_COLOR = (220, 50, 50)
HUD_TEXT_COLOR = (255, 255, 255)
OVERLAY_COLOR = (0, 0, 0, 150)
TIMER_OK_COLOR = (80, 200, 90)
TIMER_WARNING_COLOR = (240, 190, 40)
TIMER_DANGER_COLOR = (220, 60, 50)

# Vertical pixels the bobber rises at the top of its throw arc
THROW_ARC_HEIGHT = 120

# Pixels of on-screen line travel for a full-depth line
DEPTH_PIXELS = 150

# UI Display Constants
SEPARATOR_WIDTH = 60  # Width of separator lines in console output
