"""Environment-driven settings helpers."""

import os
from pathlib import Path

from dotenv import load_dotenv

_TRUE_VALUES = frozenset({"1", "true", "yes", "y"})


def load_env_file() -> None:
    """Load environment variables from .env file."""
    # Try to find .env file in project root (parent of git_brag package)
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        # Fallback: try current directory
        load_dotenv()


def env(name: str) -> str | None:
    """Return a non-blank environment variable, stripped."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_comma_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


def positive_int(value: object, default: int) -> int:
    """
    Parse a positive integer setting.

    Args:
        value: Raw value from the command line or environment
        default: Returned for missing, non-numeric, or non-positive values

    Returns:
        The parsed integer or the default
    """
    if value is None or value == "":
        return default
    try:
        number = int(float(str(value)))
    except (ValueError, OverflowError):
        return default
    return number if number > 0 else default
