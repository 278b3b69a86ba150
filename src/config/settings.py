from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values are read from the process environment first and then from an
    optional .env file in the working directory. Nothing here is required:
    the defaults talk to the public GitHub contents API.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Remote contents host
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: str = ""  # Optional credential applied at startup
    DEFAULT_BRANCH: str = "main"

    # Transport behaviour
    REQUEST_TIMEOUT_MS: int = 15000
    RATE_LIMIT_RETRIES: int = 1
    RATE_LIMIT_FALLBACK_DELAY_MS: int = 1000

    # Repository listing
    REPO_LIST_LIMIT: int = 30
    REPO_AFFILIATION: str = "owner,collaborator,organization_member"

    # Search overlay walk
    SEARCH_WALK_MAX_DEPTH: int = 4
    SEARCH_WALK_MAX_FILES: int = 500

    # Recent files / pinned repositories
    RECENT_STORE_PATH: str = "./.editor-recent.json"
    RECENT_FILES_LIMIT: int = 30
    PINNED_REPOS_LIMIT: int = 50

    # Overlapping opens: False keeps last-response-wins
    DISCARD_SUPERSEDED_OPENS: bool = False

    # Development and debugging
    DEBUG: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
