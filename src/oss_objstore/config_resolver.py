"""Parse and validate bucket configuration payloads."""

from typing import Optional

import pydantic
import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from oss_objstore.core import get_logger
from oss_objstore.core.exceptions import ConfigError
from oss_objstore.schemas import ConnectionConfig

logger = get_logger(__name__)


def parse_config(payload: bytes) -> ConnectionConfig:
    """Parse a YAML configuration payload.

    Args:
        payload: Raw YAML document

    Returns:
        The parsed configuration, not yet validated for completeness

    Raises:
        ConfigError: If the payload is not a YAML mapping of known string keys
    """
    try:
        document = yaml.safe_load(payload)
    except yaml.YAMLError as e:
        raise ConfigError(f"parsing oss configuration: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigError(
            f"parsing oss configuration: expected a mapping, got {type(document).__name__}"
        )

    try:
        return ConnectionConfig.model_validate(document)
    except pydantic.ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ConfigError(
            f"parsing oss configuration: invalid fields {', '.join(fields)}"
        ) from e


def validate_config(config: ConnectionConfig) -> None:
    """Check that all mandatory connection fields are set.

    Raises:
        ConfigError: Naming every missing field
    """
    missing = config.missing_fields()
    if missing:
        logger.warning("Incomplete oss configuration", missing=list(missing))
        raise ConfigError(
            f"insufficient oss configuration information: missing {', '.join(missing)}",
            missing=missing,
        )


class _EnvConnectionSettings(BaseSettings):
    bucket: str = Field(default="", validation_alias=AliasChoices("OSS_BUCKET"))
    endpoint: str = Field(default="", validation_alias=AliasChoices("OSS_ENDPOINT"))
    access_id: str = Field(default="", validation_alias=AliasChoices("OSS_ACCESSID"))
    access_key: str = Field(default="", validation_alias=AliasChoices("OSS_ACCESSKEY"))
    region: Optional[str] = Field(default=None, validation_alias=AliasChoices("OSS_REGION"))


def config_from_env() -> ConnectionConfig:
    """Build a configuration from ``OSS_*`` environment variables."""
    env = _EnvConnectionSettings()
    values = env.model_dump(exclude_none=True)
    return ConnectionConfig(**values)
