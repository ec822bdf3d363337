"""
Print dispatch service with thread-per-dispatch architecture.

Printing is advisory and best-effort. A print request for an order is
checked synchronously (order exists, has files, every file is still in
upload storage) and then handed to a background thread that submits each
file to the print sink. The HTTP response goes back before the printer
has done anything.

Dispatch never changes an order's status. Completion is a separate,
explicit call on OrderService.

Thread Safety:
    - The dispatch thread receives an immutable tuple of resolved paths
    - DispatchResultStore uses threading.Lock for all access
    - The store is the ONLY channel from dispatch threads back to requests

Flow:
    1. Request thread calls dispatch_service.dispatch_print(order_id)
    2. Order and files are validated; a SENDING result is published
    3. Dispatch thread submits each file; a failing file is recorded and
       the next file is still sent
    4. Dispatch thread publishes the finished DispatchResult
    5. Staff poll get_dispatch(dispatch_id) to see per-file outcomes
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

from core.exceptions import DispatchError, MissingFileError, NoFilesError
from models.dispatch_result import DispatchResult, FileDispatch
from services.order_service import OrderService
from logging_config import get_logger, get_dispatch_logger, set_thread_name


logger = get_logger(__name__)


class DispatchResultStore:
    """
    Thread-safe storage for dispatch results.

    Dispatch threads WRITE results here, request handlers READ them.
    Results are kept (not consumed on read) so a dispatch can be checked
    more than once; the oldest finished results are dropped past max_results.
    """

    def __init__(self, max_results: int = 500):
        self._results: Dict[str, DispatchResult] = {}
        self._lock = threading.Lock()
        self._max_results = max_results

    def put_result(self, result: DispatchResult) -> None:
        with self._lock:
            self._results[result.dispatch_id] = result
            self._evict_finished()
            logger.debug(f"Stored result for dispatch {result.dispatch_id[:8]}: {result.status.value}")

    def get_result(self, dispatch_id: str) -> Optional[DispatchResult]:
        with self._lock:
            return self._results.get(dispatch_id)

    def clear(self) -> int:
        """Remove all stored results. Returns the number removed."""
        with self._lock:
            count = len(self._results)
            self._results.clear()
            logger.info(f"Cleared {count} dispatch results from store")
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def _evict_finished(self) -> None:
        # Caller holds the lock. Dicts keep insertion order: oldest first.
        excess = len(self._results) - self._max_results
        if excess <= 0:
            return
        for dispatch_id in [k for k, r in self._results.items() if r.is_finished][:excess]:
            del self._results[dispatch_id]


@dataclass(frozen=True)
class DispatchTicket:
    """Handed back to the caller as soon as a dispatch is accepted."""

    dispatch_id: str
    order_id: int
    files: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dispatchId": self.dispatch_id,
            "orderId": self.order_id,
            "files": list(self.files),
        }


class DispatchService:
    """
    Sends order files to the print sink in background threads.

    Attributes:
        result_store: DispatchResultStore for reading dispatch outcomes
    """

    def __init__(self, order_service: OrderService, print_sink, upload_folder: str | Path):
        """
        Args:
            order_service: Used to look up orders (read only)
            print_sink: Object with submit(path) that raises on failure
            upload_folder: Directory holding uploaded files
        """
        self._orders = order_service
        self._sink = print_sink
        self._upload_folder = Path(upload_folder)
        self._result_store = DispatchResultStore()

        self._active_threads: Dict[str, threading.Thread] = {}
        self._threads_lock = threading.Lock()

        logger.info("DispatchService initialized")

    @property
    def result_store(self) -> DispatchResultStore:
        return self._result_store

    def dispatch_print(self, order_id: int) -> DispatchTicket:
        """
        Validate an order's files and start printing them.

        Returns immediately after the dispatch thread has started.

        Raises:
            NotFoundError: If the order does not exist
            NoFilesError: If the order references no files
            MissingFileError: If any file is missing from upload storage
                (nothing is sent in that case)
        """
        order = self._orders.get_order(order_id)

        file_refs = [ref.strip() for ref in (order.file_paths or []) if ref and ref.strip()]
        if not file_refs:
            raise NoFilesError(order_id)

        resolved: List[Tuple[str, Path]] = []
        for ref in file_refs:
            path = self.resolve_upload(ref)
            if not path.is_file():
                logger.warning(f"Order {order_id}: file missing from storage: {ref}")
                raise MissingFileError(ref, order_id)
            resolved.append((ref, path))

        dispatch_id = str(uuid.uuid4())
        self._result_store.put_result(DispatchResult.create_sending(dispatch_id, order_id))

        logger.info(f"Dispatching order {order_id} ({len(resolved)} file(s)) as {dispatch_id[:8]}")

        thread = threading.Thread(
            target=self._dispatch_thread_main,
            args=(dispatch_id, order_id, tuple(resolved)),
            name=f"Print-{dispatch_id[:8]}",
            daemon=True,
        )
        with self._threads_lock:
            self._active_threads[dispatch_id] = thread
        thread.start()

        return DispatchTicket(dispatch_id=dispatch_id, order_id=order_id, files=tuple(file_refs))

    def get_dispatch(self, dispatch_id: str) -> Optional[DispatchResult]:
        return self._result_store.get_result(dispatch_id)

    def wait(self, dispatch_id: str, timeout: Optional[float] = None) -> Optional[DispatchResult]:
        """Block until a dispatch finishes (or timeout) and return its result."""
        with self._threads_lock:
            thread = self._active_threads.get(dispatch_id)
        if thread is not None:
            thread.join(timeout=timeout)
        return self._result_store.get_result(dispatch_id)

    def resolve_upload(self, file_ref: str) -> Path:
        """
        Map a stored file reference to its path in the upload folder.

        Only the file name is used, so a reference can never point outside
        the upload folder.
        """
        return self._upload_folder / Path(file_ref.replace("\\", "/")).name

    def shutdown(self, timeout_per_thread: float = 5.0) -> None:
        """Wait for running dispatch threads (call during app shutdown)."""
        with self._threads_lock:
            active = list(self._active_threads.items())

        if not active:
            logger.info("No active dispatch threads to wait for")
            return

        logger.info(f"Waiting for {len(active)} dispatch threads to complete...")
        for dispatch_id, thread in active:
            if thread.is_alive():
                thread.join(timeout=timeout_per_thread)
                if thread.is_alive():
                    logger.warning(f"Dispatch thread {dispatch_id[:8]} did not complete in time")

        logger.info("Dispatch service shutdown complete")

    def _dispatch_thread_main(
        self,
        dispatch_id: str,
        order_id: int,
        files: Tuple[Tuple[str, Path], ...],
    ) -> None:
        """
        Submit each file to the print sink and publish the outcome.

        A failure on one file is logged and recorded; the remaining files
        are still submitted.
        """
        set_thread_name(f"Print-{dispatch_id[:8]}")
        dispatch_logger = get_dispatch_logger(dispatch_id)
        dispatch_logger.info(f"Dispatch thread starting for order {order_id}")

        started = self._result_store.get_result(dispatch_id) or DispatchResult.create_sending(
            dispatch_id, order_id
        )
        outcomes: List[FileDispatch] = []

        try:
            for ref, path in files:
                try:
                    self._sink.submit(path)
                except Exception as e:
                    error = DispatchError(ref, str(e))
                    dispatch_logger.error(error.message)
                    outcomes.append(FileDispatch(file_ref=ref, submitted=False, error=error.reason))
                else:
                    dispatch_logger.info(f"Print job sent for {ref}")
                    outcomes.append(FileDispatch(file_ref=ref, submitted=True))
        finally:
            result = started.finish(outcomes)
            self._result_store.put_result(result)

            with self._threads_lock:
                self._active_threads.pop(dispatch_id, None)

            dispatch_logger.info(f"Dispatch thread exiting: {result.status.value}")
