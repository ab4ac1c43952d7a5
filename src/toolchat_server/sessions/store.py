"""In-memory store of conversation threads.

This module provides the SessionStore class which handles:
- Atomic get-or-create of threads by id
- Clearing and listing threads
- Periodic removal of idle threads by a cancellable background task
"""

import asyncio
import logging
import threading
import time
import uuid
from typing import Callable

from toolchat_server.sessions.types import ConversationThread

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds one ConversationThread per thread id.

    The thread map is the only mutable state shared between requests. It is
    guarded by a lock so that lookups, inserts and deletes are safe from both
    event-loop tasks and worker threads. The sweeper only ever removes entries;
    a turn racing with removal keeps its own reference and the next
    get_or_create simply recreates the thread.
    """

    def __init__(
        self,
        system_prompt: str,
        conversation_timeout_seconds: float = 30 * 60,
        sweep_interval_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the SessionStore.

        Args:
            system_prompt: Content of the system message of every new thread
            conversation_timeout_seconds: Idle time after which a thread expires
            sweep_interval_seconds: Delay between two expiry sweeps
            clock: Monotonic time source, injectable for tests
        """
        self.system_prompt = system_prompt
        self.conversation_timeout_seconds = conversation_timeout_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self.clock = clock

        self._threads: dict[str, ConversationThread] = {}
        self._lock = threading.Lock()
        self._stop_event: asyncio.Event | None = None
        self._sweeper_task: asyncio.Task | None = None

    @staticmethod
    def generate_thread_id() -> str:
        """Generate a new unique thread id.

        Returns:
            32-character hexadecimal string
        """
        return uuid.uuid4().hex

    def get_or_create(self, thread_id: str) -> ConversationThread:
        """Get a thread, creating it with a system message on first reference.

        Args:
            thread_id: The thread id to resolve

        Returns:
            The existing or newly created ConversationThread
        """
        with self._lock:
            thread = self._threads.get(thread_id)
            if thread is None:
                thread = ConversationThread.create(
                    thread_id, self.system_prompt, clock=self.clock
                )
                self._threads[thread_id] = thread
                logger.info(f"Created conversation thread {thread_id}")
            return thread

    def get(self, thread_id: str) -> ConversationThread | None:
        """Get a thread without creating it."""
        with self._lock:
            return self._threads.get(thread_id)

    def clear(self, thread_id: str) -> None:
        """Remove a thread entirely. Unknown ids are ignored."""
        with self._lock:
            removed = self._threads.pop(thread_id, None)
        if removed is not None:
            logger.info(f"Cleared conversation thread {thread_id}")

    def list_active(self) -> list[str]:
        """List the ids of all live threads (order is not significant)."""
        with self._lock:
            return list(self._threads)

    def __len__(self) -> int:
        with self._lock:
            return len(self._threads)

    def sweep_expired(self, now: float | None = None) -> list[str]:
        """Remove every thread idle for longer than the configured timeout.

        Args:
            now: Current clock value, defaults to the store's clock

        Returns:
            The ids of the removed threads
        """
        if now is None:
            now = self.clock()

        with self._lock:
            expired = [
                thread_id
                for thread_id, thread in self._threads.items()
                if now - thread.last_access_time > self.conversation_timeout_seconds
            ]
            for thread_id in expired:
                del self._threads[thread_id]

        for thread_id in expired:
            logger.info(f"Removed expired conversation thread {thread_id}")
        return expired

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper_task is not None and not self._sweeper_task.done()

    def start_sweeper(self) -> None:
        """Start the periodic expiry sweep on the running event loop."""
        if self.sweeper_running:
            return
        self._stop_event = asyncio.Event()
        self._sweeper_task = asyncio.create_task(
            self._sweep_loop(self._stop_event), name="conversation-sweeper"
        )
        logger.debug(
            f"Conversation sweeper started (interval={self.sweep_interval_seconds}s)"
        )

    async def stop_sweeper(self) -> None:
        """Signal the sweeper to stop and wait until it has finished."""
        if self._sweeper_task is None or self._stop_event is None:
            return
        self._stop_event.set()
        await self._sweeper_task
        self._sweeper_task = None
        self._stop_event = None
        logger.debug("Conversation sweeper stopped")

    async def _sweep_loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(
                    stop_event.wait(), timeout=self.sweep_interval_seconds
                )
            except asyncio.TimeoutError:
                try:
                    self.sweep_expired()
                except Exception as e:
                    logger.error(f"Conversation sweep failed: {e}", exc_info=True)
