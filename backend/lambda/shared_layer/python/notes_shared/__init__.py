"""notes_shared — Shared utilities for the Notes Lambda functions.

Provides:
    - Caller identity extraction from gateway-verified Cognito claims
    - DynamoDB client singleton
    - HTTP response helpers with CORS
    - DynamoDB serialization/deserialization
    - Error taxonomy mapped to HTTP status codes
"""

__version__ = "1.0.0"
