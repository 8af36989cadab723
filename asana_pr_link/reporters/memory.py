"""In-memory status reporter for testing and dry runs."""

from ..domain.models import CommitStatus


class InMemoryStatusReporter:
    """Records reported statuses instead of sending them."""

    def __init__(self) -> None:
        self.statuses: list[CommitStatus] = []

    async def create_status(self, status: CommitStatus) -> None:
        """Record a status."""
        self.statuses.append(status)

    @property
    def last(self) -> CommitStatus:
        """The most recently reported status."""
        return self.statuses[-1]
