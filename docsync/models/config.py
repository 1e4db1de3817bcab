from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from docsync.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "config.yml"
DEFAULT_DOCS_DIR = "docs"
DEFAULT_API_BASE_URL = "https://dash.readme.io/api/v1"

# Option name -> environment variable, for error messages
_REMOTE_OPTIONS = {
    "api_key": ("apikey", "APIKEY"),
    "docs_version": ("docsversion", "DOCSVERSION"),
}


class SyncConfig(BaseModel):
    """Settings shared by every command, built once from CLI options."""

    api_key: Optional[str] = Field(
        default=None,
        description="readme.io API key. Only required by commands talking to the API.",
    )
    docs_version: Optional[str] = Field(
        default=None,
        description="Documentation version to act upon, sent as x-readme-version.",
    )
    config_file: Path = Path(DEFAULT_CONFIG_FILE)
    docs_dir: Path = Path(DEFAULT_DOCS_DIR)
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = Field(
        default=10,
        gt=0,
        description="Timeout in seconds for API calls and URL probes.",
    )
    strict: bool = Field(
        default=False,
        description="Abort on the first content file that cannot be parsed.",
    )

    def require_remote(self) -> None:
        """Raise ConfigError unless the options needed by the API are set."""
        for field, (option, env_var) in _REMOTE_OPTIONS.items():
            if not getattr(self, field):
                raise ConfigError(
                    f"Global option '{option}' is required. "
                    f"Provide it with --{option} option or {env_var} environment variable."
                )


class MarkdownizeOptions(BaseModel):
    verbose: bool = False


def load_config_file(path: Path) -> dict:
    """Return the mapping stored in the YAML config file at *path*."""
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file [{path}]: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed config file [{path}]: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file [{path}] must contain a mapping.")
    return data


def resolve_categories(slugs: Optional[str], config: SyncConfig) -> List[str]:
    """Return the category slugs a command acts upon.

    *slugs* is the comma-delimited command argument; when absent, the
    ``categories`` list of the config file is used.
    """
    if slugs:
        return [slug.strip() for slug in slugs.split(",") if slug.strip()]

    categories = load_config_file(config.config_file).get("categories")
    if not isinstance(categories, list):
        raise ConfigError(
            f"Config file [{config.config_file}] has no 'categories' list."
        )
    return [str(category) for category in categories]
