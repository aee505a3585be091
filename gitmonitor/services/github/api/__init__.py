"""GitHub REST API access."""

from gitmonitor.services.github.api.checks import DeployStatusResolver
from gitmonitor.services.github.api.client import ApiResponse, GitHubAPIClient

__all__ = ["ApiResponse", "DeployStatusResolver", "GitHubAPIClient"]
