"""Producer supervision.

Each producer runs as its own asyncio task. A crashing producer is logged and
recorded; the bar and the other producers keep running.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Coroutine, Dict, List, Any

logger = logging.getLogger(__name__)


@dataclass
class ProducerFailure:
    """A producer task that ended with an exception."""

    name: str
    error: BaseException
    failed_at: datetime = field(default_factory=datetime.now)


class Supervisor:
    """Spawns producer tasks and watches them finish."""

    def __init__(self):
        self.tasks: Dict[str, asyncio.Task] = {}
        self.failures: List[ProducerFailure] = []

    def spawn(self, name: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Start ``coro`` as producer ``name``."""
        task = asyncio.create_task(coro, name=name)
        task.add_done_callback(self._on_done)
        self.tasks[name] = task
        logger.info(f"Started producer: {name}")
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        name = task.get_name()
        if self.tasks.get(name) is task:
            del self.tasks[name]

        if task.cancelled():
            logger.debug(f"Producer cancelled: {name}")
            return

        error = task.exception()
        if error is None:
            logger.info(f"Producer finished: {name}")
            return

        self.failures.append(ProducerFailure(name=name, error=error))
        logger.error(f"Producer {name} failed: {error}", exc_info=error)

    @property
    def running(self) -> List[str]:
        return sorted(self.tasks)

    async def cancel_all(self) -> None:
        """Cancel every running producer and wait for them to unwind."""
        tasks = list(self.tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
