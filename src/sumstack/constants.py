GRID_ROWS = 6
GRID_COLS = 6
# Rows seeded from the bottom when a session starts.
INITIAL_ROWS = 3

NUMBER_MIN = 1
NUMBER_MAX = 9
TARGET_MIN = 10
TARGET_MAX = 25
POINTS_PER_TILE = 10

# Timed mode: seconds between forced row injections.
TIME_LIMIT = 15.0
# Seconds an overshooting selection stays visible before it is dropped.
OVERSHOOT_FEEDBACK_DELAY = 0.4

WINDOW_WIDTH = 540
WINDOW_HEIGHT = 820
WINDOW_TITLE = "SumStack"
BOTTOM_MARGIN = 40

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.9
BOARD_MAX_HEIGHT_PCT = 0.7
# Space reserved above the board for target, score and timer.
HEADER_HEIGHT = 150

COVER_IMAGE_ENV = "SUMSTACK_COVER_IMAGE"
LOG_LEVEL_ENV = "SUMSTACK_LOG_LEVEL"
