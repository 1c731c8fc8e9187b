"""
Query Orchestrator - Fans a term out to eligible modules and merges replies.

Every search() starts a new generation. Module calls run on a thread pool;
each completion is handed back to the UI thread through `schedule` (the
app passes GLib.idle_add). Replies from an older generation are dropped
there, so a slow module can never overwrite newer results. The token
passed to modules only asks them to stop early.
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from itertools import chain
from typing import Callable, Optional, Sequence

from loguru import logger

from keylaunch.search.module import CancelToken, Entry, SearchModule
from keylaunch.search.registry import ModuleRegistry


def merge_results(replies: Sequence[Sequence[Entry]], max_results: int = 0) -> list[Entry]:
    """
    Merge per-module replies into the displayed order.

    Args:
        replies: One entry list per module, in registry order
        max_results: Truncate after merging (0 = no limit)

    Returns:
        NORMAL entries first, then ALWAYS_BOTTOM; module order and each
        module's own order are kept within both groups.
    """
    merged = sorted(chain.from_iterable(replies), key=lambda entry: entry.matching)
    if max_results > 0:
        return merged[:max_results]
    return merged


class _Round:
    """Bookkeeping for one dispatched generation."""

    def __init__(self, generation: int, modules: list[SearchModule], token: CancelToken):
        self.generation = generation
        self.modules = modules
        self.token = token
        self.replies: list[Optional[list[Entry]]] = [None] * len(modules)
        self.outstanding = len(modules)


class QueryOrchestrator:
    """
    Dispatches terms to modules and publishes merged results.

    Args:
        registry: The configured modules
        on_results: Called on the UI thread with (generation, entries)
        schedule: Runs a callback on the UI thread, e.g. GLib.idle_add
        on_busy: Called with True while a generation is outstanding
        max_results: Truncation applied after merging
        executor: Thread pool for module calls
    """

    def __init__(self, registry: ModuleRegistry,
                 on_results: Callable[[int, list[Entry]], None],
                 schedule: Callable[..., object],
                 on_busy: Optional[Callable[[bool], None]] = None,
                 max_results: int = 0,
                 executor: Optional[Executor] = None):
        self.registry = registry
        self.on_results = on_results
        self.schedule = schedule
        self.on_busy = on_busy or (lambda busy: None)
        self.max_results = max_results
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, len(registry)),
            thread_name_prefix="keylaunch-module",
        )
        self._generation = 0
        self._round: Optional[_Round] = None

    @property
    def generation(self) -> int:
        return self._generation

    def search(self, term: str, pinned: Optional[str] = None) -> int:
        """
        Start a new generation for the term.

        Returns:
            The generation number assigned to this term.
        """
        self.cancel()
        generation = self._generation

        if not term:
            self._publish(generation, [])
            return generation

        modules = self.registry.eligible(term, pinned)
        if not modules:
            self._publish(generation, [])
            return generation

        token = CancelToken()
        self._round = _Round(generation, modules, token)
        self.on_busy(True)
        logger.debug(f"Generation {generation}: dispatching {term!r} to "
                     f"{[module.name for module in modules]}")

        for index, module in enumerate(modules):
            module_term = module.with_prefix(term) if pinned is not None else term
            future = self._executor.submit(_run_module, module, token, module_term)
            future.add_done_callback(
                lambda f, g=generation, i=index: self.schedule(self._on_reply, g, i, f)
            )

        return generation

    def cancel(self) -> None:
        """Supersede the outstanding generation without publishing."""
        self._generation += 1
        if self._round is not None:
            self._round.token.cancel()
            self._round = None
            self.on_busy(False)

    def close(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _on_reply(self, generation: int, index: int, future: Future) -> bool:
        """Collect one module reply on the UI thread."""
        current = self._round
        if current is None or generation != current.generation:
            logger.debug(f"Dropping stale reply from generation {generation}")
            return False

        if future.cancelled():
            entries = []
        else:
            entries = future.result()

        current.replies[index] = entries
        current.outstanding -= 1
        if current.outstanding:
            return False

        self._round = None
        self.on_busy(False)
        self._publish(generation, merge_results(current.replies, self.max_results))
        return False

    def _publish(self, generation: int, entries: list[Entry]) -> None:
        logger.debug(f"Generation {generation}: {len(entries)} entries")
        self.on_results(generation, entries)


def _run_module(module: SearchModule, token: CancelToken, term: str) -> list[Entry]:
    """Run one module call on a worker thread; failures count as no results."""
    if token.cancelled:
        return []
    try:
        return list(module.entries(token, term))
    except Exception:
        logger.exception(f"Module '{module.name}' failed for {term!r}")
        return []
