from typing import List, Optional


class PrunerError(Exception):
    pass


class ConfigurationInvalid(PrunerError):
    """Raised before any remote call when the run cannot be configured."""


class ListingFailed(PrunerError):
    """An app or release listing could not be completed.

    ``app_id`` is set when the failing listing belongs to a single app; it is
    None for the project-wide app listing.
    """

    def __init__(
        self,
        target: str,
        status: Optional[int],
        detail: str = "",
        app_id: Optional[str] = None,
    ):
        self.target = target
        self.status = status
        self.detail = detail
        self.app_id = app_id
        status_part = status if status is not None else "no response"
        super().__init__(f"Failed to list {target}: {status_part} {detail}".rstrip())


class ChunkDeletionFailed(PrunerError):
    def __init__(self, names: List[str], status: Optional[int], detail: str = ""):
        self.names = list(names)
        self.status = status
        self.detail = detail
        status_part = status if status is not None else "no response"
        super().__init__(
            f"Batch delete of {len(self.names)} release(s) failed: "
            f"{status_part} {detail}".rstrip()
        )
