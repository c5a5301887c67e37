"""Configuration resolution for the command line using pydantic-settings.

The API key and timeout can come from command line flags, environment
variables, the user config file or a ``.env`` file. Resolution produces a
``ClientConfig`` that is handed to the Notion client; the client itself never
reads the environment or the filesystem.
"""

import logging
import tomllib
from pathlib import Path

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.notion.transport import NOTION_VERSION, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "NOTION_API_KEY"

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "notion-cli" / "config.toml"


class MissingApiKeyError(Exception):
    """Raised when no API key is found in any source."""

    pass


class CliSettings(BaseSettings):
    """Settings read from environment variables with the NOTION_ prefix.

    :param api_key: Integration token (NOTION_API_KEY).
    :param timeout: Request timeout in seconds (NOTION_TIMEOUT).
    :param api_version: Notion-Version header value (NOTION_API_VERSION).
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTION_",
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Notion integration token")
    timeout: int | None = Field(default=None, ge=1, description="Request timeout in seconds")
    api_version: str = Field(default=NOTION_VERSION, description="Notion API version")


class FileConfig(BaseModel):
    """Contents of the user config file."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = None
    timeout: int | None = Field(default=None, ge=1)


class ApiKeySources(BaseModel):
    """Candidate API keys from each source, in no particular order."""

    model_config = ConfigDict(frozen=True)

    flag: str | None = None
    env: str | None = None
    file: str | None = None
    dotenv: str | None = None


class ClientConfig(BaseModel):
    """Resolved configuration consumed by the Notion client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)
    timeout: int = Field(default=REQUEST_TIMEOUT, ge=1)
    api_version: str = Field(default=NOTION_VERSION, min_length=1)


def resolve_api_key(sources: ApiKeySources, *, config_path: Path = DEFAULT_CONFIG_PATH) -> str:
    """Pick the API key with priority flag > env > config file > .env.

    :param sources: Candidate keys.
    :param config_path: Config file location, used in the error message.
    :returns: The first non-empty key.
    :raises MissingApiKeyError: If no source provides a key.
    """
    for candidate in (sources.flag, sources.env, sources.file, sources.dotenv):
        if candidate:
            return candidate

    raise MissingApiKeyError(
        "Notion API key not found. Set it using one of these methods: "
        f"export {API_KEY_ENV_VAR}=secret_xxx; "
        f'add api_key = "secret_xxx" to {config_path}; '
        "or pass --api-key."
    )


def load_file_config(path: Path = DEFAULT_CONFIG_PATH) -> FileConfig:
    """Load the user config file.

    A missing or unreadable file is treated as empty.

    :param path: Location of the TOML config file.
    :returns: Parsed config.
    """
    if not path.exists():
        return FileConfig()

    try:
        with path.open("rb") as f:
            return FileConfig.model_validate(tomllib.load(f))
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring invalid config file {path}: {e}")
        return FileConfig()


def load_dotenv_api_key() -> str | None:
    """Read the API key from a ``.env`` file without exporting it."""
    dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        return None
    return dotenv_values(dotenv_path).get(API_KEY_ENV_VAR)


def resolve_config(
    *,
    api_key: str | None = None,
    timeout: int | None = None,
    config_path: Path = DEFAULT_CONFIG_PATH,
) -> ClientConfig:
    """Resolve the client configuration from flags and the environment.

    :param api_key: API key passed on the command line.
    :param timeout: Timeout passed on the command line.
    :param config_path: Location of the user config file.
    :returns: Resolved configuration.
    :raises MissingApiKeyError: If no API key is found.
    """
    settings = CliSettings()
    file_config = load_file_config(config_path)

    sources = ApiKeySources(flag=api_key, env=settings.api_key, file=file_config.api_key)
    # .env is only consulted as a last resort
    if not (sources.flag or sources.env or sources.file):
        sources = sources.model_copy(update={"dotenv": load_dotenv_api_key()})

    resolved_key = resolve_api_key(sources, config_path=config_path)

    resolved_timeout = next(
        (value for value in (timeout, settings.timeout, file_config.timeout) if value is not None),
        REQUEST_TIMEOUT,
    )

    return ClientConfig(
        api_key=resolved_key,
        timeout=resolved_timeout,
        api_version=settings.api_version,
    )
