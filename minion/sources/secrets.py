from __future__ import annotations

import json
from dataclasses import dataclass

from minion.errors import SourceError


@dataclass(frozen=True)
class DatabaseCredentials:
    db_url: str


def fetch_database_credentials(region: str, secret_name: str, client=None) -> DatabaseCredentials:
    if client is None:
        try:
            import boto3
        except Exception as exc:  # pragma: no cover - depends on the optional aws extra
            raise SourceError("boto3 is required for secret lookups: pip install 'iiko-minion[aws]'") from exc
        client = boto3.client("secretsmanager", region_name=region)

    try:
        result = client.get_secret_value(SecretId=secret_name)
    except Exception as exc:
        raise SourceError(f"Cannot read secret {secret_name}: {exc}") from exc

    secret_string = result.get("SecretString")
    if not secret_string:
        raise SourceError(f"Secret {secret_name} is empty")

    try:
        payload = json.loads(secret_string)
    except json.JSONDecodeError as exc:
        raise SourceError(f"Secret {secret_name} is not valid JSON: {exc}") from exc

    db_url = payload.get("db_url") if isinstance(payload, dict) else None
    if not db_url:
        raise SourceError(f"Secret {secret_name} has no db_url")
    return DatabaseCredentials(db_url=str(db_url))
