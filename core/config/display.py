"""Display and UI configuration constants."""

# Simulation canvas dimensions in pixels
SURFACE_WIDTH = 800
SURFACE_HEIGHT = 600

# Width of the status panel drawn to the right of the canvas
PANEL_WIDTH = 300

# The frame rate for the window loop, in frames per second
FRAME_RATE = 30

# Obstacle radii are magnified so they stay visible at small scales
OBSTACLE_MAGNIFICATION = 3.0

# Marker radii in pixels
BIRD_RADIUS = 5
RESOURCE_RADIUS = 5
PREDATOR_RADIUS = 6
PREDATOR_OUTLINE_WIDTH = 2
ZONE_RING_RADIUS = 14
ZONE_RING_WIDTH = 1
ZONE_LABEL_FONT_SIZE = 16

# Colours
BACKGROUND_COLOR = (255, 255, 255)
OBSTACLE_COLOR = (128, 128, 128)  # Gray
FOOD_COLOR = (255, 165, 0)  # Orange
REST_COLOR = (173, 216, 230)  # Light blue
BIRD_RESTING_COLOR = (0, 0, 255)  # Blue
BIRD_SEARCHING_FOOD_COLOR = (128, 0, 128)  # Purple
BIRD_MIGRATING_COLOR = (0, 128, 0)  # Green
PREDATOR_COLOR = (200, 30, 30)
PREDATOR_OUTLINE_COLOR = (0, 0, 0)
ZONE_RING_COLOR = (220, 90, 40)
ZONE_LABEL_COLOR = (60, 30, 10)

# UI Constants - Status panel
PANEL_BACKGROUND_COLOR = (20, 20, 40)
PANEL_TEXT_COLOR = (220, 220, 255)
PANEL_MUTED_COLOR = (150, 150, 150)
PANEL_RUNNING_COLOR = (100, 255, 100)
PANEL_STOPPED_COLOR = (255, 200, 100)
PANEL_FONT_SIZE = 22
PANEL_LINE_HEIGHT = 20

# UI Display Constants
SEPARATOR_WIDTH = 60  # Width of separator lines in console output
