"""notes_shared.aws_clients — Lazy-singleton AWS service clients.

The boto3 client is created on first call and cached for subsequent
invocations of the same execution environment, so cold starts only pay the
construction cost when the client is actually needed.
"""

from __future__ import annotations

import os
from typing import Optional

import boto3
from botocore.config import Config

DYNAMODB_REGION: str = os.environ.get(
    "DYNAMODB_REGION", os.environ.get("AWS_REGION", "us-east-1")
)

_ddb = None


def _get_ddb(region: Optional[str] = None):
    """Get (or create) the DynamoDB client singleton."""
    global _ddb
    if _ddb is None:
        _ddb = boto3.client(
            "dynamodb",
            region_name=region or DYNAMODB_REGION,
            config=Config(retries={"max_attempts": 5, "mode": "standard"}),
        )
    return _ddb
