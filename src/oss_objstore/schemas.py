"""Bucket connection schemas for oss-objstore."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

REQUIRED_FIELDS = ("bucket", "endpoint", "access_id", "access_key")


class ConnectionConfig(BaseModel):
    """Connection parameters for a single S3-compatible bucket.

    Mirrors the YAML document accepted by :func:`parse_config`::

        bucket: thanos-blocks
        endpoint: https://oss-cn-hangzhou.aliyuncs.com
        access_id: LTAI...
        access_key: ...

    All four fields must be non-empty before a client is opened; that check
    lives in :func:`oss_objstore.config_resolver.validate_config` so that an
    incomplete document can still be parsed and reported on.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    bucket: str = Field(default="", description="Bucket name")
    endpoint: str = Field(default="", description="Object store service URL")
    access_id: str = Field(default="", description="Access key ID")
    access_key: SecretStr = Field(
        default=SecretStr(""), description="Secret access key, never logged"
    )
    region: str = Field(default="us-east-1", description="Signing region")

    @field_validator("bucket", "endpoint", "access_id", "access_key", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value

    def missing_fields(self) -> tuple[str, ...]:
        """Return the names of required fields that are empty."""
        values = {
            "bucket": self.bucket,
            "endpoint": self.endpoint,
            "access_id": self.access_id,
            "access_key": self.access_key.get_secret_value(),
        }
        return tuple(name for name in REQUIRED_FIELDS if not values[name])
