from os import environ

import boto3
from pydantic import BaseModel, ConfigDict

_cached_clerk_secret: str | None = None


def _resolve_clerk_secret() -> str:
    """Fetch Clerk secret from Secrets Manager at runtime, with caching."""
    global _cached_clerk_secret
    if _cached_clerk_secret is not None:
        return _cached_clerk_secret

    # Local dev: use env var directly
    direct = environ.get("CLERK_SECRET_KEY", "")
    if direct:
        _cached_clerk_secret = direct
        return direct

    # Deployed: fetch from Secrets Manager by ARN
    arn = environ.get("CLERK_SECRET_ARN", "")
    if not arn:
        return ""

    client = boto3.client("secretsmanager")
    _cached_clerk_secret = client.get_secret_value(SecretId=arn)["SecretString"]
    return _cached_clerk_secret


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    dynamodb_endpoint: str | None = None
    s3_endpoint: str | None = None
    records_table: str
    media_bucket: str
    media_base_url: str
    clerk_secret_key: str = ""
    environment: str
    countdown_interval_seconds: float = 1.0
    log_level: str = "INFO"


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config, for testing only."""
    global _cached_config, _cached_clerk_secret
    _cached_config = None
    _cached_clerk_secret = None


def _default_media_base_url(bucket: str, region: str, s3_endpoint: str | None) -> str:
    if s3_endpoint:
        return f"{s3_endpoint.rstrip('/')}/{bucket}"
    return f"https://{bucket}.s3.{region}.amazonaws.com"


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    region = environ.get("AWS_REGION", "us-east-1")
    s3_endpoint = environ.get("S3_ENDPOINT")
    bucket = environ.get("MEDIA_BUCKET", "triptribe-media")

    _cached_config = Config(
        aws_region=region,
        dynamodb_endpoint=environ.get("DYNAMODB_ENDPOINT"),
        s3_endpoint=s3_endpoint,
        records_table=environ.get("RECORDS_TABLE", "TripTribeRecords"),
        media_bucket=bucket,
        media_base_url=environ.get("MEDIA_BASE_URL") or _default_media_base_url(bucket, region, s3_endpoint),
        clerk_secret_key=_resolve_clerk_secret(),
        environment=environ.get("ENVIRONMENT", "local"),
        countdown_interval_seconds=float(environ.get("COUNTDOWN_INTERVAL_SECONDS", "1")),
        log_level=environ.get("LOG_LEVEL", "INFO"),
    )
    return _cached_config
