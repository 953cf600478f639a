"""Background workers for remote calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, QThread, Signal

if TYPE_CHECKING:
    from collections.abc import Callable


class RequestWorker(QObject):
    """
    Runs one blocking call on a worker thread and reports the outcome,
    tagged with the request's sequence number.

    Args:
        seq: Sequence number of the request
        call: The blocking call

    """

    #: Emitted with (sequence number, result) when the call returns.
    succeeded = Signal(int, object)
    #: Emitted with (sequence number, exception) when the call raises.
    failed = Signal(int, object)
    #: Emitted after either of the above.
    finished = Signal()

    def __init__(self, seq: int, call: Callable[[], Any]) -> None:
        super().__init__()
        self.seq = seq
        self.call = call

    def run(self) -> None:
        """Run the call and emit its outcome."""
        try:
            result = self.call()
        except Exception as e:  # noqa: BLE001
            self.failed.emit(self.seq, e)
        else:
            self.succeeded.emit(self.seq, result)
        finally:
            self.finished.emit()


class RequestRunner(QObject):
    """
    Starts :class:`RequestWorker` threads and keeps them alive until they
    finish.

    Args:
        parent: Parent object

    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        #: Running (thread, worker) pairs.
        self._running: list[tuple[QThread, RequestWorker]] = []

    def start(
        self,
        seq: int,
        call: Callable[[], Any],
        on_success: Callable[[int, Any], None],
        on_failure: Callable[[int, Exception], None],
    ) -> RequestWorker:
        """
        Run ``call`` on a new thread.

        ``on_success`` and ``on_failure`` are invoked on the thread that owns
        this runner (the UI thread) through queued signal connections.

        Args:
            seq: Sequence number of the request
            call: The blocking call
            on_success: Called with (seq, result)
            on_failure: Called with (seq, exception)

        Returns:
            The worker

        """
        thread = QThread(self)
        worker = RequestWorker(seq, call)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.succeeded.connect(on_success)
        worker.failed.connect(on_failure)
        worker.finished.connect(thread.quit)
        thread.finished.connect(self._on_thread_finished)
        self._running.append((thread, worker))
        thread.start()
        return worker

    @property
    def active(self) -> int:
        """Number of threads still running."""
        return len(self._running)

    def wait_all(self, msecs: int = 5000) -> None:
        """Wait for every running thread to finish."""
        for thread, _ in list(self._running):
            thread.wait(msecs)

    def _on_thread_finished(self) -> None:
        # Queued to this object's thread, so the list is only touched there
        thread = self.sender()
        self._running = [(t, w) for t, w in self._running if t is not thread]
        if isinstance(thread, QThread):
            thread.deleteLater()
