"""
Print dispatch result models.

These models carry the outcome of sending an order's files to the print
sink. Dispatch threads write them; request handlers read them through the
DispatchResultStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, List, Optional


class DispatchStatus(Enum):
    """
    Status of a print dispatch.

    Lifecycle:
        SENDING -> (SENT | PARTIAL | FAILED)
    """

    SENDING = "sending"
    """Files are being handed to the print sink."""

    SENT = "sent"
    """Every file was accepted by the print sink."""

    PARTIAL = "partial"
    """Some files were accepted, some failed."""

    FAILED = "failed"
    """No file was accepted."""


@dataclass
class FileDispatch:
    """Outcome for a single file of a dispatch."""

    file_ref: str
    """File reference as stored on the order."""

    submitted: bool
    """Whether the print sink accepted the file."""

    error: str = ""
    """Failure reason (empty on success)."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file_ref,
            "status": "submitted" if self.submitted else "failed",
            "error": self.error or None,
        }


@dataclass
class DispatchResult:
    """
    Result of one print request for an order.

    Thread Safety:
        - The dispatch thread builds file outcomes on its own instance
        - It publishes a finished result to the store once
        - Readers only ever see published instances
    """

    dispatch_id: str
    order_id: int
    started_at: datetime
    status: DispatchStatus = DispatchStatus.SENDING
    files: List[FileDispatch] = field(default_factory=list)
    finished_at: Optional[datetime] = None

    @classmethod
    def create_sending(cls, dispatch_id: str, order_id: int) -> "DispatchResult":
        """Placeholder published as soon as the dispatch is accepted."""
        return cls(
            dispatch_id=dispatch_id,
            order_id=order_id,
            started_at=datetime.now(timezone.utc),
        )

    def finish(self, files: List[FileDispatch]) -> "DispatchResult":
        """
        Build the finished result from per-file outcomes.

        Args:
            files: One FileDispatch per file, in order

        Returns:
            New DispatchResult with SENT, PARTIAL or FAILED status
        """
        submitted = sum(1 for f in files if f.submitted)
        if submitted == len(files):
            status = DispatchStatus.SENT
        elif submitted:
            status = DispatchStatus.PARTIAL
        else:
            status = DispatchStatus.FAILED

        return DispatchResult(
            dispatch_id=self.dispatch_id,
            order_id=self.order_id,
            started_at=self.started_at,
            status=status,
            files=list(files),
            finished_at=datetime.now(timezone.utc),
        )

    @property
    def is_finished(self) -> bool:
        return self.status != DispatchStatus.SENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dispatchId": self.dispatch_id,
            "orderId": self.order_id,
            "status": self.status.value,
            "startedAt": self.started_at.isoformat(),
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "files": [f.to_dict() for f in self.files],
        }
