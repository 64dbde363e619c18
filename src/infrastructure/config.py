"""Configuration loading from the environment and an optional .env file."""

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

TOKEN_VARIABLES = ("GITHUB_API_TOKEN", "GITHUB_TOKEN")
DEPENDENCY_AUTHORS_VARIABLE = "DEPENDENCY_AUTHORS"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class Settings:
    """Settings for a single run."""

    github_token: str
    dependency_authors: FrozenSet[str] = field(default_factory=frozenset)


def parse_author_list(value: Optional[str]) -> FrozenSet[str]:
    """Parse a comma separated list of logins."""
    if not value:
        return frozenset()
    return frozenset(login.strip() for login in value.split(",") if login.strip())


def load_settings(environ: Optional[Mapping[str, str]] = None, env_file: Optional[str] = ".env") -> Settings:
    """
    Load settings.

    Values from ``env_file`` are used only where the environment does not
    already define them.

    Args:
        environ: Environment mapping. If None, uses os.environ.
        env_file: Path to a dotenv file, or None to skip it

    Returns:
        Settings

    Raises:
        ConfigurationError: If no GitHub token is configured
    """
    if environ is None:
        environ = os.environ

    values = {}
    if env_file and os.path.isfile(env_file):
        logger.debug(f"Loading settings from {env_file}")
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(environ)

    token = next((values[name].strip() for name in TOKEN_VARIABLES if values.get(name, "").strip()), None)
    if not token:
        raise ConfigurationError(
            "Please provide a valid GitHub API token through the GITHUB_API_TOKEN "
            "environment variable or the .env file. See .env.example."
        )

    return Settings(
        github_token=token,
        dependency_authors=parse_author_list(values.get(DEPENDENCY_AUTHORS_VARIABLE))
    )
