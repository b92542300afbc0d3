"""Static league statistics constants."""

BLOWOUT_MARGIN: int = 7
CLUTCH_MARGIN: int = 2

HEAT_WINDOW: int = 5
RECENT_RESULTS_WINDOW: int = 10

MIN_PLAYOFF_TEAMS: int = 2
MAX_PLAYOFF_TEAMS: int = 32
DEFAULT_SERIES_FORMAT: str = "single"
DEFAULT_POINT_TARGET: int = 21
SERIES_FORMATS: tuple[str, ...] = ("single", "best_of_3", "best_of_5")

# Leader lists: accuracy and scoring average need a minimum sample.
MIN_GAMES_FOR_ACCURACY: int = 3
MIN_GAMES_FOR_AVERAGE: int = 3
LEADERS_LIMIT: int = 10

ROUND_NAMES_FROM_END: tuple[str, ...] = ("Finals", "Semifinals", "Quarterfinals")
