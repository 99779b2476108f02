"""
Configuration for the kilo text editor.

Settings live in a plain ``key=value`` file, by default
``~/kilo/config/kilo.conf``. The ``KILO_CONFIG`` environment variable points
somewhere else. Lines starting with ``#`` are comments. Unknown keys and bad
values are logged and skipped so a broken config file never stops the editor.
"""
import os
from dataclasses import dataclass, fields

from kilo import logger

CONFIG_PATH = "~/kilo/config/kilo.conf"

@dataclass
class Config:
    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: int = 5
    log_file: str = "kilo.log"

def config_path() -> str:
    """Return the path of the config file, honouring KILO_CONFIG."""
    return os.path.expanduser(os.environ.get("KILO_CONFIG", CONFIG_PATH))

def parse_config(lines) -> Config:
    """Build a Config from an iterable of ``key=value`` lines."""
    config = Config()
    types = {f.name: f.type for f in fields(Config)}
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config line {lineno}: expected key=value, got '{line}'")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key not in types:
            logger.log(f"config line {lineno}: unknown key '{key}'")
            continue
        if types[key] is int:
            try:
                number = int(value)
            except ValueError:
                logger.log(f"config line {lineno}: '{key}' needs an integer, got '{value}'")
                continue
            if number < 1 and key == "tab_stop":
                logger.log(f"config line {lineno}: tab_stop must be at least 1")
                continue
            setattr(config, key, number)
        else:
            setattr(config, key, value)
    return config

def load_config(path: str = None) -> Config:
    """
    Load the config file. A missing file gives the defaults; an unreadable
    one is logged and also gives the defaults.
    """
    path = path or config_path()
    if not os.path.isfile(path):
        return Config()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return parse_config(f)
    except OSError as e:
        logger.log_error(f"reading config {path}", e)
        return Config()
