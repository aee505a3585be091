"""
Configuration module.

Values come from the environment (optionally a .env file in the working
directory). Everything here is read once at import time.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _float_env(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _int_env(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


# Git CLI
GIT_BINARY = os.getenv("GIT_BINARY", "git")
GIT_REMOTE_NAME = os.getenv("GIT_REMOTE_NAME", "origin")

# Per-call timeouts (seconds)
REMOTE_URL_TIMEOUT_SECONDS = _float_env("REMOTE_URL_TIMEOUT_SECONDS", 3)
READ_PROBE_TIMEOUT_SECONDS = _float_env("READ_PROBE_TIMEOUT_SECONDS", 5)
DIFF_TIMEOUT_SECONDS = _float_env("DIFF_TIMEOUT_SECONDS", 8)
FETCH_TIMEOUT_SECONDS = _float_env("FETCH_TIMEOUT_SECONDS", 10)
STAGE_TIMEOUT_SECONDS = _float_env("STAGE_TIMEOUT_SECONDS", 10)
COMMIT_TIMEOUT_SECONDS = _float_env("COMMIT_TIMEOUT_SECONDS", 15)
SYNC_TIMEOUT_SECONDS = _float_env("SYNC_TIMEOUT_SECONDS", 30)

# GitHub REST API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")
GITHUB_REQUEST_TIMEOUT_SECONDS = _float_env("GITHUB_REQUEST_TIMEOUT_SECONDS", 10)
GITHUB_USER_AGENT = os.getenv("GITHUB_USER_AGENT", "GitMonitor")

# Commit message generation
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_MAX_TOKENS = _int_env("OPENAI_MAX_TOKENS", 300)
OPENAI_TIMEOUT = _float_env("OPENAI_TIMEOUT", 60)
COMMIT_MESSAGE_LANGUAGE = os.getenv("COMMIT_MESSAGE_LANGUAGE", "English")
DIFF_CHAR_LIMIT = _int_env("DIFF_CHAR_LIMIT", 6000)
DIFF_TRUNCATION_MARKER = "\n\n[diff truncated]"
DEFAULT_PUSH_TITLE = "Push pending commits"

# Widget configuration file and polling
GIT_MONITOR_CONFIG = os.getenv(
    "GIT_MONITOR_CONFIG", os.path.expanduser("~/.git-monitor/config.json")
)
POLL_INTERVAL_SECONDS = _int_env("POLL_INTERVAL_SECONDS", 30)
GIT_MONITOR_LOG_LEVEL = os.getenv("GIT_MONITOR_LOG_LEVEL", "INFO")

# Display truncation limits (characters)
STATUS_ERROR_MAX_CHARS = 80
DEPLOY_ERROR_MAX_CHARS = 100
OPERATION_ERROR_MAX_CHARS = 200
