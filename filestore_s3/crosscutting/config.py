"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the adapter's documented behavior

Collaborators:
  - container.py: builds the boto3 client and the default S3 store
  - infrastructure/storage/config.py: S3StoreConfig.from_settings()
  - crosscutting/logger.py: log level and format

Constraints:
  - No business logic: pure configuration
  - Populated once; explicit arguments passed to the store win over it

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
  - Credentials/region also accept the standard AWS_* variables
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Attributes:
        store_name: Name under which the S3 store registers (default: "s3")
        s3_bucket: Bucket name (required to build a store)
        s3_folder: Key prefix inside the bucket (default: "")
        s3_acl: ACL applied on writes (default: "private")
        s3_endpoint_url: S3/MinIO endpoint URL (optional)
        s3_access_key: Access key ID (S3_ACCESS_KEY or AWS_ACCESS_KEY_ID)
        s3_secret_key: Secret access key (S3_SECRET_KEY or AWS_SECRET_ACCESS_KEY)
        s3_session_token: Session token (optional)
        s3_region: Region (S3_REGION or AWS_DEFAULT_REGION, optional)
        s3_max_retries: botocore-level retries per request (default: 3)
        s3_ssl_enabled: Use HTTPS (default: True)
        s3_verify_ssl: Verify TLS certificates (default: True)
        s3_force_path_style: Path-style addressing, needed by MinIO (default: False)
        s3_signature_version: Signature version override (optional)
        s3_connect_timeout_seconds: botocore connect timeout (default: 60)
        s3_read_timeout_seconds: botocore read timeout (default: 60)
        read_tries: Attempts per read stream (default: 3)
        read_try_freq_ms: Delay between read attempts in ms (default: 1000)
        log_level: Logging level (default: INFO)
        log_json: Emit JSON logs (default: True)
    """

    store_name: str = "s3"

    # Storage - bucket layout
    s3_bucket: str = ""
    s3_folder: str = ""
    s3_acl: str = "private"

    # Storage - connection (passed through to boto3/botocore)
    s3_endpoint_url: str = ""
    s3_access_key: str = Field(
        default="",
        validation_alias=AliasChoices("s3_access_key", "aws_access_key_id"),
    )
    s3_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("s3_secret_key", "aws_secret_access_key"),
    )
    s3_session_token: str = Field(
        default="",
        validation_alias=AliasChoices("s3_session_token", "aws_session_token"),
    )
    s3_region: str = Field(
        default="",
        validation_alias=AliasChoices("s3_region", "aws_default_region"),
    )
    s3_max_retries: int = 3
    s3_ssl_enabled: bool = True
    s3_verify_ssl: bool = True
    s3_force_path_style: bool = False
    s3_signature_version: str = ""
    s3_connect_timeout_seconds: float = 60.0
    s3_read_timeout_seconds: float = 60.0

    # Read stream resilience
    read_tries: int = 3
    read_try_freq_ms: int = 1000

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("read_tries")
    @classmethod
    def read_tries_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("read_tries must be >= 1")
        return v

    @field_validator("read_try_freq_ms", "s3_max_retries")
    @classmethod
    def must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("s3_folder")
    @classmethod
    def strip_folder(cls, v: str) -> str:
        return (v or "").strip()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
