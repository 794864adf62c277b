"""
JSON persistence for the ordered server collection.

The file holds ``{"servers": [...]}`` in display order.
"""

import json
from pathlib import Path
from typing import List, Sequence

from pydantic import ValidationError as PydanticValidationError

from mcp_roster.core.exceptions import ConfigError
from mcp_roster.core.models import ServerEntry
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)


class ServerStore:
    """Reads and writes the collection file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[ServerEntry]:
        """
        Load the collection.

        Returns:
            Entries in stored order, empty when the file does not exist

        Raises:
            ConfigError: If the file is unreadable or malformed
        """
        if not self.path.exists():
            logger.debug(f"No server file at {self.path}, starting empty")
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            servers = [ServerEntry.model_validate(item) for item in data.get("servers", [])]
        except (OSError, json.JSONDecodeError, AttributeError, PydanticValidationError) as e:
            raise ConfigError(
                f"Failed to load servers from {self.path}: {e}",
                error_code="STORE_READ_FAILED",
            )

        logger.debug(f"Loaded {len(servers)} servers from {self.path}")
        return servers

    def save(self, servers: Sequence[ServerEntry]) -> None:
        """Write the collection atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"servers": [s.model_dump(mode="json") for s in servers]}

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as e:
            raise ConfigError(
                f"Failed to save servers to {self.path}: {e}",
                error_code="STORE_WRITE_FAILED",
            )

        logger.debug(f"Saved {len(servers)} servers to {self.path}")
