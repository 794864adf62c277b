"""
Reconciliation of remote candidates against the local collection.

Remote candidates never carry a local id, so equivalence is decided on a
composite key of the normalized name and the endpoint.
"""

from typing import Iterable, List, Sequence, Set, Tuple, Union

from mcp_roster.core.models import (
    ServerCandidate,
    ServerEntry,
    SyncOutcome,
    SyncStatus,
)
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)

EquivalenceKey = Tuple[str, Tuple[str, ...]]


def equivalence_key(server: Union[ServerEntry, ServerCandidate]) -> EquivalenceKey:
    """
    Build the deduplication key for a server.

    The name is trimmed and casefolded. The endpoint is the base URL without
    trailing slashes, or the command and its arguments kept as separate
    items for local servers. Each endpoint is tagged with its kind so a URL
    never matches a command with the same text.
    """
    name = server.name.strip().casefold()
    if server.base_url:
        endpoint = ("url", server.base_url.strip().rstrip("/"))
    else:
        endpoint = ("command", server.command.strip(), *server.args)
    return name, endpoint


def merge(
    candidates: Iterable[ServerCandidate],
    existing: Sequence[ServerEntry],
    provider_name: str = "ModelScope",
    rejected: int = 0,
) -> SyncOutcome:
    """
    Work out which candidates are new to the collection.

    Neither argument is modified. New entries get fresh ids and keep the
    candidate order; candidates equivalent to an existing entry, or to an
    earlier candidate, are skipped.

    Args:
        candidates: Definitions returned by the remote provider
        existing: Current local collection
        provider_name: Used in the summary message
        rejected: Malformed records the provider response dropped, reported
            in the summary message when non-zero

    Returns:
        Successful SyncOutcome listing the entries to add
    """
    seen: Set[EquivalenceKey] = {equivalence_key(s) for s in existing}
    added: List[ServerEntry] = []
    skipped = 0

    for candidate in candidates:
        key = equivalence_key(candidate)
        if key in seen:
            skipped += 1
            continue
        seen.add(key)
        added.append(candidate.to_entry())

    logger.debug(f"Merge produced {len(added)} new servers, skipped {skipped} existing")

    if added:
        noun = "server" if len(added) == 1 else "servers"
        message = f"Added {len(added)} {noun} from {provider_name}"
    else:
        message = f"No new servers to add from {provider_name}"

    if rejected:
        noun = "record" if rejected == 1 else "records"
        message += f" ({rejected} malformed {noun} skipped)"

    return SyncOutcome(status=SyncStatus.SUCCESS, added_servers=added, message=message)
