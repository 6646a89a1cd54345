from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Dict, Any
from pathlib import Path


class Settings(BaseSettings):
    # Split defaults (used when the CLI is given no explicit mode)
    SPLIT_PART_COUNT: int = 2
    SPLIT_MAX_SIZE_MB: float = 10.0
    SPLIT_MAX_CHARS: int = 50000
    SPLIT_BASE_NAME: str = "SplitPart"
    SPLIT_ENCODING: str = "utf-8"

    # File scanning for combine/list
    SCAN_EXTENSIONS: List[str] = [".cs", ".csproj", ".xml"]

    # Combine
    COMBINE_OUTPUT_NAME: str = "CombinedFiles.cs"
    COMBINE_INCLUDE_METADATA: bool = True
    COMBINE_COMMENT_PREFIX: str = "//"

    # List
    LIST_OUTPUT_NAME: str = "FileList.json"

    # Count
    COUNT_EXTENSIONS: List[str] = [".txt", ".cs", ".xml", ".json"]

    # Observability & UI
    LOG_FORMAT: str = "auto"  # json|plain|auto
    NO_COLOR: bool = Field(
        default=False,
        description="Disable colored console output",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_file}")
        else:
            # Auto-discover .codemosaic.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".codemosaic.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables override file values
        env_settings = cls()
        for name in env_settings.model_fields_set:
            config_data.pop(name, None)

        return cls(**config_data)


# Default settings - will be replaced by load_config() during CLI startup
SETTINGS = Settings()
