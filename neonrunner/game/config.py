# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60
MAX_DT = 0.1                # clamp per-frame step after stalls / tab suspend (sec)

# --- World / Physics ---
GRAVITY = 2000.0            # downward acceleration (px/s^2)
JUMP_FORCE = -800.0         # vertical velocity applied on jump (px/s)
LANDING_TOLERANCE = 10.0    # how far the previous bottom may sit below a top and still land (px)
DEATH_MARGIN = 100.0        # fall this far below the canvas and the run is over (px)

# --- Player ---
PLAYER_START_X = 100.0
PLAYER_START_Y = 200.0
PLAYER_SIZE = 30

# --- Auto-run speed ---
MIN_SPEED = 350.0           # px/s at score 0
MAX_SPEED = 700.0           # speed cap (px/s)
SPEED_SCALE = 1.0           # px/s gained per meter of score

# --- Dash ---
DASH_SPEED_MULT = 3.0
DASH_DURATION = 0.2         # sec, gravity suspended

# --- Charge / QTE ---
QTE_CYCLE_DURATION = 0.5    # sec for the bar to travel 0 -> 1
QTE_SWEET_SPOT_WIDTH = 0.15
QTE_SWEET_SPOT_LO = 0.1     # the whole sweet spot fits in [LO, HI]
QTE_SWEET_SPOT_HI = 0.9
QTE_MAX_HOLD_TIME = 3.0     # sec of charging before overheat (auto-fail)
QTE_WARN_TIME = 1.0         # remaining sec at which the overheat warning shows

# --- Super dash / auto-landing ---
SUPER_DASH_SPEED_MULT = 4.5
SUPER_DASH_SPEED_Y = -600.0 # climb while flying (px/s)
SUPER_DASH_DURATION = 0.4
AUTO_LAND_DURATION = 0.3
AHEAD_MARGIN = 20.0         # a landing target must start this far ahead of the player (px)
LAND_INSET = 30.0           # touchdown point inset from the target's leading edge (px)

# --- Input thresholds ---
TAP_MAX_TIME = 0.2          # sec
HOLD_DELAY = 0.12           # sec before a press counts as a hold
SWIPE_MIN_DIST = 60.0       # px of rightward travel for a dash

# --- Level generation ---
PLATFORM_HEIGHT = 30
START_PLATFORM = (0.0, 400.0, 1000.0)    # x, y, width of the opening floor
START_ZONE = (400.0, 200.0)              # offset, width of its charge zone
START_PLATFORM_WIDTH = 400.0
MIN_PLATFORM_WIDTH_TARGET = 150.0
START_GAP = 80.0
GAP_GROWTH = 50.0           # extra minimum gap at full difficulty
MAX_GAP_SAFETY_MARGIN = 0.85
DIFFICULTY_SCORE = 500      # score at which difficulty saturates
Y_STEP_BASE = 100.0
Y_STEP_GROWTH = 100.0
MIN_Y_FRAC = 0.3
MAX_Y_FRAC = 0.8
GENERATE_AHEAD_SCREENS = 2
CULL_BEHIND = 200.0
CHARGE_ZONE_CHANCE = 0.6
CHARGE_ZONE_WIDTH = 180.0
CHARGE_ZONE_MAX_FRACTION = 0.6   # a zone never covers more than this share of its platform
CHARGE_ZONE_SNAP = 12.0          # player bottom must be this close to the top to stand in a zone
SEED_DEFAULT = 12345

# --- Camera ---
CAMERA_LEAD = 0.2           # player sits this fraction of the width from the left edge
CAMERA_SMOOTHING = 10.0

# --- Scoring ---
SCORE_SCALE = 100.0         # px per meter

# --- Trail ---
TRAIL_DECAY = 4.0           # alpha lost per second

# --- Leaderboard ---
LEADERBOARD_SIZE = 10
LEADERBOARD_PATH = "neonrunner_scores.json"

# --- Colors (RGB) ---
COLOR_BG = (15, 23, 42)
COLOR_FG = (226, 232, 240)
COLOR_PLAYER = (6, 182, 212)
COLOR_PLAYER_DASH = (34, 211, 238)
COLOR_PLAYER_SUPER = (234, 179, 8)
COLOR_PLAYER_CHARGE = (168, 85, 247)
COLOR_PLAT = (168, 85, 247)
COLOR_PLAT_TOP = (216, 180, 254)
COLOR_ZONE_BG = (74, 222, 128, 38)
COLOR_ZONE_GLOW = (74, 222, 128)
COLOR_QTE_BG = (30, 41, 59)
COLOR_QTE_SUCCESS = (74, 222, 128)
COLOR_QTE_FAIL = (244, 63, 94)
COLOR_QTE_MARKER = (245, 158, 11)
COLOR_DANGER = (244, 63, 94)
COLOR_ACCENT = (34, 211, 238)
