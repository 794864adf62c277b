"""
Remote sync client for the ModelScope MCP service listing.

Fetches the server definitions visible to a token and classifies the
result. Failures are returned as outcomes rather than raised so callers
can report them without unwinding.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from mcp_roster.core.models import FetchOutcome, ServerCandidate, SyncStatus
from mcp_roster.utils.config import ModelScopeConfig
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)

PROVIDER_NAME = "ModelScope"

UNAUTHORIZED_MESSAGE = "Invalid ModelScope token, please enter a new one"
FAILURE_MESSAGE = "Failed to sync servers from ModelScope"


class ModelScopeClient:
    """Fetches candidate servers from ModelScope."""

    def __init__(
        self,
        config: Optional[ModelScopeConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            config: Provider settings, defaults to the public ModelScope host
            transport: Optional httpx transport, used to stub the provider
        """
        self.config = config or ModelScopeConfig()
        self._transport = transport

    @property
    def services_url(self) -> str:
        return f"{self.config.base_url}{self.config.services_path}"

    async def fetch_candidates(self, token: str) -> FetchOutcome:
        """
        Query the provider for every server the token can see.

        Args:
            token: Bearer token

        Returns:
            FetchOutcome with status SUCCESS, UNAUTHORIZED or FAILURE
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        logger.debug(f"Fetching MCP servers from {self.services_url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(self.services_url, headers=headers)
        except httpx.RequestError as e:
            logger.warning(f"ModelScope request failed: {e}")
            return self._failure(f"Request error: {e}")

        if response.status_code in (401, 403):
            logger.info(f"ModelScope rejected the token (HTTP {response.status_code})")
            return FetchOutcome(
                status=SyncStatus.UNAUTHORIZED,
                message=UNAUTHORIZED_MESSAGE,
                error_details=f"Status: {response.status_code}",
            )

        if not response.is_success:
            logger.warning(f"ModelScope returned HTTP {response.status_code}")
            return self._failure(f"Status: {response.status_code}")

        try:
            records = self._extract_records(response.json())
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Malformed ModelScope response: {e}")
            return self._failure(f"Malformed response: {e}")

        candidates, rejected = self._coerce_records(records)
        logger.info(
            f"Fetched {len(candidates)} candidate servers from ModelScope",
            extra={"candidates": len(candidates), "rejected": rejected},
        )
        return FetchOutcome(
            status=SyncStatus.SUCCESS,
            candidates=candidates,
            message=f"Fetched {len(candidates)} servers from {PROVIDER_NAME}",
            rejected=rejected,
        )

    def _failure(self, details: str) -> FetchOutcome:
        return FetchOutcome(
            status=SyncStatus.FAILURE,
            message=FAILURE_MESSAGE,
            error_details=details,
        )

    def _extract_records(self, payload: Any) -> List[Any]:
        """Pull the server list out of the {"Data": {"Result": [...]}} envelope."""
        if not isinstance(payload, dict):
            raise ValueError("response body is not an object")
        data = payload.get("Data")
        if not isinstance(data, dict):
            raise ValueError("missing 'Data' object")
        records = data.get("Result")
        if records is None:
            return []
        if not isinstance(records, list):
            raise ValueError("'Data.Result' is not a list")
        return records

    def _coerce_records(self, records: List[Any]) -> Tuple[List[ServerCandidate], int]:
        """Validate records one at a time, dropping the malformed ones."""
        candidates = []
        rejected = 0
        for index, record in enumerate(records):
            try:
                candidate = self._to_candidate(record)
            except (PydanticValidationError, TypeError, ValueError) as e:
                rejected += 1
                logger.warning(f"Skipping malformed ModelScope server #{index}: {e}")
                continue
            if not candidate.has_endpoint:
                rejected += 1
                logger.warning(f"Skipping ModelScope server '{candidate.name}' without endpoint")
                continue
            candidates.append(candidate)
        return candidates, rejected

    def _to_candidate(self, record: Any) -> ServerCandidate:
        if not isinstance(record, dict):
            raise TypeError(f"expected object, got {type(record).__name__}")

        remote_id = record.get("id")
        remote_id = str(remote_id) if remote_id not in (None, "") else None
        name = record.get("chinese_name") or record.get("name") or remote_id or ""

        return ServerCandidate(
            remote_id=remote_id,
            name=name,
            description=record.get("description") or "",
            base_url=self._endpoint_url(record),
            command=record.get("command") or "",
            args=record.get("args") or [],
            env=self._env_map(record.get("env")),
            provider=PROVIDER_NAME,
            provider_url=(
                f"{self.config.base_url}/mcp/servers/@{remote_id}" if remote_id else None
            ),
            logo_url=record.get("logo_url") or None,
            tags=self._tag_list(record.get("tags")),
        )

    @staticmethod
    def _env_map(env: Any) -> Dict[str, str]:
        # Values may arrive as numbers or booleans
        if not isinstance(env, dict):
            return {}
        return {str(key): str(value) for key, value in env.items() if value is not None}

    @staticmethod
    def _tag_list(tags: Any) -> List[str]:
        if not isinstance(tags, list):
            return []
        return [tag for tag in tags if isinstance(tag, str)]

    def _endpoint_url(self, record: Dict[str, Any]) -> str:
        urls = record.get("operational_urls")
        if isinstance(urls, list) and urls:
            first = urls[0]
            if isinstance(first, dict) and first.get("url"):
                return str(first["url"])
        return record.get("base_url") or record.get("url") or ""
