#!/usr/bin/env python3
"""Create the records table and media bucket for local development.

Targets DynamoDB Local (DYNAMODB_ENDPOINT) and an S3-compatible endpoint
(S3_ENDPOINT, e.g. LocalStack or MinIO). The bucket step is skipped when no
S3 endpoint is configured.

Usage:
    python scripts/create_local_tables.py
"""

import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from triptribe.config import get_config
from triptribe.db.dynamo import COLLECTION_KEY, DOC_KEY


def create_records_table(dynamodb, table_name):
    """Single table: collection path as partition key, document id as sort key."""
    try:
        dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": COLLECTION_KEY, "KeyType": "HASH"},
                {"AttributeName": DOC_KEY, "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": COLLECTION_KEY, "AttributeType": "S"},
                {"AttributeName": DOC_KEY, "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        print(f"✓ Created {table_name} table")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"✓ {table_name} table already exists")
        else:
            raise


def create_media_bucket(s3, bucket):
    try:
        s3.create_bucket(Bucket=bucket)
        print(f"✓ Created {bucket} bucket")
    except ClientError as e:
        if e.response["Error"]["Code"] in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
            print(f"✓ {bucket} bucket already exists")
        else:
            raise


def main():
    config = get_config()

    endpoint_url = config.dynamodb_endpoint or "http://localhost:8000"
    print(f"Creating DynamoDB table at {endpoint_url}...")

    # Local emulators accept any credentials
    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )
    create_records_table(dynamodb, config.records_table)

    if config.s3_endpoint:
        print(f"Creating media bucket at {config.s3_endpoint}...")
        s3 = boto3.client(
            "s3",
            endpoint_url=config.s3_endpoint,
            region_name=config.aws_region,
            aws_access_key_id="dummy",
            aws_secret_access_key="dummy",
        )
        create_media_bucket(s3, config.media_bucket)
    else:
        print("S3_ENDPOINT not set, skipping media bucket")

    print()
    print("✅ Local resources ready")


if __name__ == "__main__":
    main()
