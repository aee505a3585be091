"""
Widget configuration file loader.

Reads the JSON file the desktop widget maintains (list of repositories,
polling interval, API credentials). The engine only reads it; writing the
file belongs to the UI layer.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gitmonitor.common.config.config import GIT_MONITOR_CONFIG, POLL_INTERVAL_SECONDS
from gitmonitor.models.types import RepositoryRef
from gitmonitor.services.repository.project_name import detect_project_name

logger = logging.getLogger(__name__)


class RepoEntry(BaseModel):
    """One configured repository."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    path: str


class MonitorConfig(BaseModel):
    """Configuration consumed by the synchronization engine."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    repos: List[RepoEntry] = Field(default_factory=list)
    interval_seconds: int = Field(
        default=POLL_INTERVAL_SECONDS, alias="intervalSeconds", ge=1
    )
    openai_api_key: str = Field(default="", alias="openaiKey")
    github_token: str = Field(default="", alias="githubToken")

    def repository_refs(self) -> List[RepositoryRef]:
        """Repository references in configuration order.

        Entries without a display name get one from the project's .env
        files, or the folder name.
        """
        refs = []
        for entry in self.repos:
            name = entry.name.strip() or detect_project_name(entry.path)
            refs.append(RepositoryRef(display_name=name, local_path=entry.path))
        return refs


def _apply_environment_fallbacks(config: MonitorConfig) -> MonitorConfig:
    updates = {}
    if not config.openai_api_key:
        updates["openai_api_key"] = os.getenv("OPENAI_API_KEY", "")
    if not config.github_token:
        updates["github_token"] = os.getenv("GITHUB_TOKEN", "")
    return config.model_copy(update=updates) if updates else config


def load_monitor_config(path: Optional[str] = None) -> MonitorConfig:
    """Load the widget configuration.

    Args:
        path: JSON file path (defaults to GIT_MONITOR_CONFIG)

    Returns:
        MonitorConfig; defaults when the file is missing or unreadable.
    """
    config_path = Path(path or GIT_MONITOR_CONFIG).expanduser()

    if not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using defaults")
        return _apply_environment_fallbacks(MonitorConfig())

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        config = MonitorConfig.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Could not read configuration {config_path}: {e}")
        config = MonitorConfig()

    logger.info(f"Loaded configuration with {len(config.repos)} repositories")
    return _apply_environment_fallbacks(config)
