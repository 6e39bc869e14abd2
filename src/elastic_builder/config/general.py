from pathlib import Path
from typing import Annotated, ClassVar, override

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from elastic_builder.types.general import LogLevel, SortDirection


class LogSettings(BaseModel):
    """Settings for log handling."""

    file_enabled: Annotated[
        bool, Field(description="Also write logs to a rotating file.")
    ] = False
    file_path: Annotated[Path, Field(description="Location of the log file.")] = Path(
        "logs/elastic_builder.log"
    )
    serialize: Annotated[
        bool, Field(description="Write file logs as JSON lines instead of text.")
    ] = False
    rotation: Annotated[
        str, Field(description="When the log file should be rotated.")
    ] = "monthly"
    retention: Annotated[
        int, Field(description="Number of rotated log files to keep.")
    ] = 3


class BuilderSettings(BaseModel):
    """Settings affecting how documents are assembled."""

    default_sort_direction: Annotated[
        SortDirection,
        Field(description="Direction used by sort() when none is given."),
    ] = "asc"
    trace_documents: Annotated[
        bool,
        Field(description="Log every built document at TRACE level."),
    ] = False


class GeneralConfig(BaseSettings):
    """General library config."""

    log_level: LogLevel = Field(
        default="INFO",
        description="Level of library logs to print/keep.",
    )
    log: LogSettings = LogSettings()
    builder: BuilderSettings = BuilderSettings()

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(  # pyright:ignore[reportIncompatibleVariableOverride] This is the intended pattern
        case_sensitive=False,
        env_prefix="ELASTIC_BUILDER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="config/config.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    @override
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Ensure proper setting priority order."""
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
        )


CONFIG = GeneralConfig()
