import logging
import os
import time

from configparser import ConfigParser
from typing import Optional

LOGGER = logging.getLogger("scorebook")
DEFAULT_CONFIG_PATH = os.path.expanduser("~/.config/scorebook/scorebook.ini")
CONFIG_ENV_VAR = "SCOREBOOK_CONFIG"


def load_config(config_source: Optional[str] = None) -> ConfigParser:
    if not config_source:
        config_source = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    if isinstance(config_source, str):
        config = ConfigParser()
        config.read(config_source)
        return config
    elif isinstance(config_source, ConfigParser):
        return config_source
    else:
        raise ValueError("unknown config type passed to scorebook: ", config_source)


def switch_strike(striker, non_striker):
    temp = non_striker
    new_non_striker = striker
    new_striker = temp
    return new_striker, new_non_striker


def get_current_time() -> float:
    return time.time()


def balls_to_overs(balls: int) -> str:
    balls_in_over = balls % 6
    overs_completed = balls // 6
    return f"{overs_completed}.{balls_in_over}"


def cricket_overs(balls: int) -> float:
    # N.M notation, not a fraction: 29 balls is 4.5 overs
    return balls // 6 + (balls % 6) / 10


def two_decimals(numerator: float, denominator: float, scale: int = 1) -> str:
    if not denominator:
        return "0.00"
    return f"{numerator / denominator * scale:.2f}"
