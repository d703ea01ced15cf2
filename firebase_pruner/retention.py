from datetime import datetime, timezone, timedelta
from typing import List, Optional, Sequence, Tuple

from .models import Release, RetentionPolicy


def sort_newest_first(releases: Sequence[Release]) -> List[Release]:
    # sorted() is stable with reverse=True, so equal timestamps keep input order
    return sorted(releases, key=lambda r: r.create_time, reverse=True)


def cutoff_for(policy: RetentionPolicy, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=policy.max_age_days)


def partition_releases(
    releases: Sequence[Release],
    policy: RetentionPolicy,
    now: Optional[datetime] = None,
) -> Tuple[List[Release], List[Release]]:
    """Split releases into (keep, delete), both newest first.

    A release is deleted only when it is outside the ``min_keep`` newest
    and strictly older than the age cutoff.
    """
    cutoff = cutoff_for(policy, now)
    keep: List[Release] = []
    delete: List[Release] = []
    for rank, release in enumerate(sort_newest_first(releases)):
        if rank >= policy.min_keep and release.create_time < cutoff:
            delete.append(release)
        else:
            keep.append(release)
    return keep, delete


def select_for_deletion(
    releases: Sequence[Release],
    policy: RetentionPolicy,
    now: Optional[datetime] = None,
) -> List[Release]:
    return partition_releases(releases, policy, now)[1]
