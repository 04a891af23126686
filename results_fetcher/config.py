"""Configuration for a results fetch run."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal, TypeAlias

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from results_fetcher.errors import ConfigurationError
from results_fetcher.models.suite import Suite

log = logging.getLogger(__name__)

SETTINGS_SECTION = "Azure.RestClient"
DEFAULT_CONFIGURATION_ID = 123
DEFAULT_OUTPUT_DIRECTORY = Path("reports")

MissingDurationPolicy: TypeAlias = Literal["fail", "exclude"]


class FetcherConfig(BaseModel):
    """Settings of one fetch run.

    Field aliases follow the ``Azure.RestClient`` section of an
    ``appsettings.json`` file; snake case names are accepted as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    organization: str = Field(..., alias="Organisation")
    project: str = Field(..., alias="Project")
    token: SecretStr = Field(..., alias="PersonalAccessToken")
    test_plan_id: int = Field(..., gt=0, alias="TestPlanId")
    configuration_id: int = Field(
        default=DEFAULT_CONFIGURATION_ID, alias="TestConfigurationId"
    )
    output_directory: Path = Field(
        default=DEFAULT_OUTPUT_DIRECTORY, alias="OutputDirectory"
    )
    suites: Sequence[Suite] = Field(..., min_length=1, alias="Suites")
    api_base_url: str = Field(default="https://dev.azure.com", alias="ApiBaseUrl")
    request_timeout: float = Field(default=30.0, gt=0, alias="RequestTimeout")
    max_pages: int | None = Field(default=None, gt=0, alias="MaxPages")
    missing_duration: MissingDurationPolicy = Field(
        default="fail", alias="MissingDurationPolicy"
    )

    @field_validator("configuration_id", mode="before")
    @classmethod
    def _default_configuration_id(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CONFIGURATION_ID
        return value

    @field_validator("output_directory", mode="before")
    @classmethod
    def _default_output_directory(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_OUTPUT_DIRECTORY
        return value


def load_config(path: Path, **overrides: Any) -> FetcherConfig:
    """Load run settings from a JSON settings file.

    Args:
        path: Path to the settings file
        overrides: Field values replacing the ones read from the file;
            ``None`` values are ignored

    Raises:
        ConfigurationError: If the file cannot be read or is invalid

    """
    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Settings file {path} is not valid JSON: {exc}"
        ) from exc

    if not isinstance(settings, dict) or not isinstance(
        section := settings.get(SETTINGS_SECTION), dict
    ):
        raise ConfigurationError(
            f"Settings file {path} has no '{SETTINGS_SECTION}' section"
        )

    try:
        config = FetcherConfig.model_validate(section)
        if changes := {k: v for k, v in overrides.items() if v is not None}:
            config = FetcherConfig.model_validate(config.model_dump() | changes)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in {path}: {exc}") from exc

    log.info(
        "Loaded settings: plan=%d configuration=%d suites=%d",
        config.test_plan_id,
        config.configuration_id,
        len(config.suites),
    )
    return config
