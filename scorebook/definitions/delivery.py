import enum

BALLS_PER_OVER = 6
MAX_WICKETS = 10
VALID_RUNS = (0, 1, 2, 3, 4, 6)
EXTRA_RUNS = 1


class Extras(enum.Enum):
    NONE = "none"
    WIDE = "wide"
    NO_BALL = "noBall"
