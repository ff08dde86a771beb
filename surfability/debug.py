# ABOUTME: Debug logging helper gated on the DEBUG environment flag
# ABOUTME: Prints tagged messages to stdout only when Config.DEBUG is on

from surfability.config import Config


def debug_log(message: str, tag: str = "APP") -> None:
    """Print a tagged debug line when debug mode is enabled."""
    if Config.DEBUG:
        print(f"[DEBUG][{tag}] {message}")
