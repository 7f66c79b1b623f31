"""
FILE: corkboard/nav/dispatch.py
PURPOSE: Fire-and-forget channel carrying IO intents to a single worker thread
EXPORTS:
  - IoEvent (Enum)
  - IoIntent, IoResult (dataclasses)
  - Dispatcher
DEPENDENCIES:
  - queue, threading (stdlib)
  - corkboard.core.exceptions (DispatchError)
NOTES:
  - dispatch() never blocks: a full or closed channel raises DispatchError
    and leaves is_loading cleared
  - The worker only reports IoResults; state is mutated on the caller's
    thread when poll() drains them
"""

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from ..core.constants import DISPATCH_QUEUE_SIZE
from ..core.exceptions import DispatchError

logger = logging.getLogger(__name__)


class IoEvent(Enum):
    SAVE_LOCAL_DATA = "Save Local Data"
    SAVE_CLOUD_DATA = "Save Cloud Data"
    LOAD_SAVE = "Load Save"
    RESET_VISIBLE_BOARDS = "Reset Visible Boards"
    EXPORT_JSON = "Export to JSON"
    SAVE_CONFIG = "Save Config"
    CREATE_BOARD = "Create Board"
    CREATE_CARD = "Create Card"
    DELETE_CARD = "Delete Card"
    SET_CARD_STATUS = "Set Card Status"
    LIST_SAVES = "List Saves"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IoIntent:
    event: IoEvent
    payload: Any = None


@dataclass
class IoResult:
    intent: IoIntent
    ok: bool
    message: str = ""
    boards: Optional[list] = None
    board_id: Optional[int] = None
    card_id: Optional[int] = None
    saves: Optional[list] = None


Handler = Callable[[IoIntent], IoResult]

_STOP = object()


class Dispatcher:
    """
    Bounded queue of IoIntents consumed by one worker thread.

    Call start() to run the worker; without it, run_pending() processes
    queued intents on the calling thread.
    """

    def __init__(self, handler: Handler, maxsize: int = DISPATCH_QUEUE_SIZE):
        self._handler = handler
        self._intents: queue.Queue = queue.Queue(maxsize=maxsize)
        self._completions: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._closed = False
        self._pending = 0

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="corkboard-io", daemon=True)
        self._thread.start()

    def dispatch(self, intent: IoIntent) -> None:
        """
        Queue an intent without blocking.

        Raises:
            DispatchError: If the channel is closed or full
        """
        if self._closed:
            raise DispatchError(f"Cannot send {intent.event}: IO worker is stopped")
        self._pending += 1
        try:
            self._intents.put_nowait(intent)
        except queue.Full:
            self._pending -= 1
            raise DispatchError(f"Cannot send {intent.event}: IO queue is full")
        logger.debug("Dispatched %s", intent.event)

    def poll(self) -> List[IoResult]:
        """Drain finished results; clears is_loading once nothing is in flight."""
        results = []
        while True:
            try:
                results.append(self._completions.get_nowait())
            except queue.Empty:
                break
        self._pending = max(self._pending - len(results), 0)
        return results

    def run_pending(self) -> int:
        """Handle every queued intent on the calling thread. Returns the count handled."""
        handled = 0
        while True:
            try:
                intent = self._intents.get_nowait()
            except queue.Empty:
                return handled
            if intent is _STOP:
                return handled
            self._completions.put(self._handle(intent))
            handled += 1

    def close(self, timeout: float = 2.0) -> None:
        if self._closed:
            return
        self._closed = True
        if self._thread is None:
            return
        try:
            self._intents.put(_STOP, timeout=timeout)
        except queue.Full:
            logger.error("IO worker did not accept stop signal")
            return
        self._thread.join(timeout)

    def _handle(self, intent: IoIntent) -> IoResult:
        try:
            result = self._handler(intent)
        except Exception as e:
            logger.exception("IO intent %s failed", intent.event)
            return IoResult(intent, ok=False, message=str(e))
        logger.info("%s: %s", intent.event, result.message or ("ok" if result.ok else "failed"))
        return result

    def _run(self) -> None:
        while True:
            intent = self._intents.get()
            if intent is _STOP:
                break
            self._completions.put(self._handle(intent))
