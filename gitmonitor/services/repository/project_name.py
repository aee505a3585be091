"""Project display-name detection from a repository's .env files."""

import logging
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

# Common project-name variables, in priority order
PROJECT_NAME_KEYS = [
    "APP_NAME",
    "NEXT_PUBLIC_APP_NAME",
    "VITE_APP_NAME",
    "PROJECT_NAME",
    "APPLICATION_NAME",
    "REACT_APP_NAME",
    "APP_TITLE",
    "SITE_NAME",
    "NAME",
]

ENV_FILES = [".env", ".env.local", ".env.development", ".env.production"]


def find_project_name(values: Mapping[str, Optional[str]]) -> str:
    """First non-blank project-name variable, or an empty string."""
    for key in PROJECT_NAME_KEYS:
        value = (values.get(key) or "").strip()
        if value:
            return value
    return ""


def detect_project_name(repo_path: str) -> str:
    """Best display name for a repository.

    Args:
        repo_path: Repository directory.

    Returns:
        The first project-name variable found in the .env files, or the
        directory name.
    """
    root = Path(repo_path).expanduser()

    for env_file in ENV_FILES:
        env_path = root / env_file
        if not env_path.is_file():
            continue
        try:
            values = dotenv_values(env_path, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable {env_path}: {e}")
            continue
        name = find_project_name(values)
        if name:
            return name

    return root.name or str(repo_path)
