"""
Game constants for the non-transitive dice game.
"""

# Dice
MIN_FACES = 4
MAX_FACES = 20
MIN_DICE = 3
FACE_SEPARATOR = ","

# Fair random protocol
MIN_KEY_BYTES = 32  # 256 bits
DEFAULT_HMAC_ALGORITHM = "sha256"
TEXT_ENCODING = "utf-8"

# First-move exchange: result 0 means the user chooses first
FIRST_MOVE_RANGE = (0, 1)
USER_FIRST_RESULT = 0

# Console
EXIT_KEY = "X"
HELP_KEY = "?"
EXAMPLE_ARGS = "2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"
DEFAULT_PRECISION = 4
DEFAULT_TABLE_FORMAT = "grid"
TABLE_TITLE = "Probability of the win for the user"
TABLE_CORNER = "User dice \\ Computer dice"
