from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = PROJECT_ROOT / "matches"

SCHEMA_VERSION = 1
SAVE_PREFIX = "volleyscout_save_"

# Logical court: 18 x 9 units, net at x = 9
COURT_LENGTH = 18.0
COURT_WIDTH = 9.0
NET_X = COURT_LENGTH / 2

# Drawable area (min_x, min_y, width, height), includes serve-zone margin
VIEWBOX = (-4.0, -2.0, 26.0, 13.0)

# Larger than the drawn marker so handles stay grabbable on small screens
HIT_RADIUS = 1.5

LONG_PRESS_SECONDS = 1.5

# Server stands behind the end line on each side
SERVE_X_ME = -2.0
SERVE_X_OP = 20.0

DEFAULT_MY_NAME = "Home"
DEFAULT_OP_NAME = "Away"
