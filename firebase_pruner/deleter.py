from typing import Any, List, Sequence

from .api import DEFAULT_TIMEOUT, TRANSPORT_ERRORS, batch_delete
from .errors import ChunkDeletionFailed
from .models import FailedChunk, Outcome
from .utils import chunked


CHUNK_SIZE = 100


def delete_chunk(
    session: Any,
    project_id: str,
    app_id: str,
    names: List[str],
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    try:
        resp = batch_delete(session, project_id, app_id, names, timeout=timeout)
    except TRANSPORT_ERRORS as err:
        raise ChunkDeletionFailed(names, None, str(err)) from err
    if not resp.ok:
        raise ChunkDeletionFailed(names, resp.status_code, resp.text)


def delete_releases(
    session: Any,
    project_id: str,
    app_id: str,
    names: Sequence[str],
    chunk_size: int = CHUNK_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
) -> Outcome:
    """Batch-delete ``names`` in order, one request per chunk.

    A failed chunk is recorded and skipped; the remaining chunks still run.
    Names in a failed chunk never count as deleted.
    """
    outcome = Outcome()
    if not names:
        print("No releases provided to delete.")
        return outcome

    for chunk in chunked(names, chunk_size):
        print(
            f"Attempting to delete a chunk of {len(chunk)} release(s) for app {app_id}."
        )
        try:
            delete_chunk(session, project_id, app_id, chunk, timeout=timeout)
        except ChunkDeletionFailed as err:
            print(f"Failed to batch delete a chunk of releases for app {app_id}: {err}")
            print(f"Releases in this chunk: {', '.join(chunk)}")
            outcome.failed_chunks.append(
                FailedChunk(names=err.names, status=err.status, detail=err.detail)
            )
            continue
        outcome.deleted_count += len(chunk)
        print(f"Deleted a chunk of {len(chunk)} release(s) for app {app_id}.")

    print(
        f"Finished deleting releases for app {app_id}: "
        f"{outcome.deleted_count} deleted, {outcome.failed_count} failed."
    )
    return outcome
