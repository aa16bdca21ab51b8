"""Configuration management for ghcompare."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PairsConfigError(ValueError):
    """Raised when pairs.yaml describes an incomplete pair."""


class ComparisonPair(BaseModel):
    """A pair of handles to compare in batch mode."""

    user_a: str
    user_b: str
    refresh: bool = False


class PairsConfig(BaseModel):
    """Comparison pairs loaded from pairs.yaml.

    Entries may omit `user_a` when `defaults.user_a` names the account
    every rival is measured against.
    """

    defaults: dict[str, str] = Field(default_factory=dict)
    pairs: list[dict] = Field(default_factory=list)

    def get_pairs(self) -> list[ComparisonPair]:
        """Resolve each entry into a complete pair.

        Returns:
            List of ComparisonPair in file order.

        Raises:
            PairsConfigError: If an entry has no user_b, or no user_a and
                no default to fall back on.
        """
        default_user = self.defaults.get("user_a")
        resolved = []

        for number, entry in enumerate(self.pairs, start=1):
            user_a = entry.get("user_a") or default_user
            user_b = entry.get("user_b")
            if not user_a:
                raise PairsConfigError(
                    f"Pair {number} has no user_a and defaults.user_a is not set"
                )
            if not user_b:
                raise PairsConfigError(f"Pair {number} has no user_b")
            resolved.append(
                ComparisonPair(user_a=user_a, user_b=user_b, refresh=entry.get("refresh", False))
            )

        return resolved


class Settings(BaseSettings):
    """Application settings from environment variables and config files."""

    model_config = SettingsConfigDict(
        env_prefix="GHCOMPARE_",
        env_file=".env",
        extra="ignore",
    )

    github_token: str = ""
    imgflip_username: str = ""
    imgflip_password: str = ""
    cache_ttl_seconds: float = 300.0
    request_timeout: float = 30.0
    config_dir: Path = Path("config")

    def load_pairs(self) -> list[ComparisonPair]:
        """Load comparison pairs from pairs.yaml.

        Returns:
            List of configured pairs, empty if the file does not exist.

        Raises:
            PairsConfigError: If an entry is incomplete.
        """
        pairs_file = self.config_dir / "pairs.yaml"
        if not pairs_file.exists():
            return []

        with open(pairs_file) as f:
            data = yaml.safe_load(f) or {}

        return PairsConfig(**data).get_pairs()


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings loaded from environment and config files.
    """
    return Settings()
