"""
Poke Flip Match Engine

Owns the live round and the rules that react to it:

1. Flip     - the view toggles a card by id; nothing else happens directly
2. Resolve  - two unmatched face-up cards are judged after a short delay
3. Complete - a fully matched board is re-dealt after a longer delay

Every mutation emits an Event. The pair and completion watchers run
synchronously on each state change, before the flip call returns, so the
next external input always sees a settled board. Deferred actions are loop
timers holding the exact card objects they were scheduled for.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from pokeflip.config import GameConfig

from .types import Card, Event, EventType, Round

if TYPE_CHECKING:
    from pokeflip.catalog.base import CatalogProvider


logger = logging.getLogger(__name__)

GameListener = Callable[[Event], Any]

# Events after which the watchers re-evaluate the board.
STATE_CHANGES = frozenset({
    EventType.ROUND_LOADED,
    EventType.CARD_FLIPPED,
    EventType.CARDS_MATCHED,
    EventType.CARDS_REVERTED,
})


class Game:
    """
    The match engine for one player session.

    Must be driven from inside a running asyncio loop: timers and round
    fetches are scheduled on it.
    """

    def __init__(self, catalog: "CatalogProvider", config: Optional[GameConfig] = None):
        self.catalog = catalog
        self.config = config or GameConfig()

        # None while a round is being fetched
        self.round: Optional[Round] = None

        self._generation = 0
        self._listeners: list[GameListener] = []
        self._queue: list[Event] = []
        self._dispatching = False

        # Deferred actions
        self._timers: set[asyncio.TimerHandle] = set()
        self._pending_pairs: set[tuple[int, int, int]] = set()  # (generation, id, id)
        self._reload_scheduled_for: Optional[int] = None
        self._fetch_task: Optional[asyncio.Task] = None

    # =========================================================================
    # Read access for the view
    # =========================================================================

    @property
    def cards(self) -> list[Card]:
        return list(self.round.cards) if self.round is not None else []

    @property
    def generation(self) -> int:
        return self.round.generation if self.round is not None else self._generation

    @property
    def is_loading(self) -> bool:
        return self.round is None

    @property
    def is_complete(self) -> bool:
        return self.round is not None and self.round.is_complete

    @property
    def matched_pairs(self) -> int:
        return len(self.round.disabled_cards()) // 2 if self.round is not None else 0

    def subscribe(self, listener: GameListener) -> Callable[[], None]:
        """
        Register a callback for every engine event.

        The callback may be a plain function or a coroutine function.
        Returns a function that removes the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Operations
    # =========================================================================

    async def start(self) -> Round:
        """Deal the first round."""
        return await self.refetch()

    def flip_card(self, card_id: int) -> bool:
        """
        Toggle the card with the given id.

        Unknown ids (expected while a round is being replaced) and matched
        cards are ignored. Returns True if a card was flipped.
        """
        card = self.round.get_card(card_id) if self.round is not None else None
        if card is None:
            logger.debug("Ignoring flip of unknown card %r", card_id)
            return False
        if card.disabled:
            logger.debug("Ignoring flip of matched card %d", card_id)
            return False

        card.flip()
        self._emit(Event(
            EventType.CARD_FLIPPED,
            {"card_id": card.id, "flipped": card.flipped},
            generation=self.round.generation,
        ))
        return True

    def reload(self) -> asyncio.Task:
        """
        Discard the current round and fetch a new one.

        Only one fetch runs at a time; while one is in flight its task is
        returned instead of starting another.
        """
        if self._fetch_task is not None and not self._fetch_task.done():
            return self._fetch_task

        loop = asyncio.get_running_loop()
        self._fetch_task = loop.create_task(self._load_round())
        return self._fetch_task

    async def refetch(self) -> Round:
        """Reload and wait for the new round to land."""
        return await self.reload()

    def close(self) -> None:
        """Cancel pending timers and any in-flight fetch."""
        for handle in list(self._timers):
            handle.cancel()
        self._timers.clear()
        self._pending_pairs.clear()

        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._listeners.clear()

    # =========================================================================
    # Round loading
    # =========================================================================

    async def _load_round(self) -> Round:
        previous = self.round
        self.round = None
        self._pending_pairs.clear()
        self._emit(Event(
            EventType.ROUND_LOADING,
            {"previous_generation": previous.generation if previous is not None else None},
        ))

        try:
            creatures = await self.catalog.fetch_shuffled_pairs()
        except Exception:
            # Providers should already degrade to [].
            logger.exception("Catalog fetch failed, dealing an empty round")
            creatures = []

        self._generation += 1
        new_round = Round.from_creatures(creatures, generation=self._generation)
        self.round = new_round
        self._reload_scheduled_for = None

        if new_round.cards:
            logger.info("Dealt round %d with %d cards", new_round.generation, len(new_round))
        else:
            logger.warning("Dealt empty round %d", new_round.generation)

        self._emit(Event(
            EventType.ROUND_LOADED,
            {"card_count": len(new_round)},
            generation=new_round.generation,
        ))
        return new_round

    # =========================================================================
    # Event dispatch
    # =========================================================================

    def _emit(self, event: Event) -> None:
        """
        Queue an event and drain the queue.

        Events emitted by watchers while draining are appended and handled in
        order, so listeners always see cause before effect.
        """
        self._queue.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                current = self._queue.pop(0)
                if current.type in STATE_CHANGES:
                    self._watch_pairs()
                    self._watch_completion()
                self._notify(current)
        finally:
            self._dispatching = False

    def _notify(self, event: Event) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
            except Exception:
                logger.exception("Listener failed on %s", event.type.name)
                continue

            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                task.add_done_callback(self._log_listener_failure)

    @staticmethod
    def _log_listener_failure(task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Async listener failed: %s", error, exc_info=error)

    def _call_later(self, delay: float, callback: Callable[..., None], *args: Any) -> None:
        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def fire() -> None:
            self._timers.discard(handle)
            callback(*args)

        handle = loop.call_later(delay, fire)
        self._timers.add(handle)

    # =========================================================================
    # Watchers
    # =========================================================================

    def _watch_pairs(self) -> None:
        round_ = self.round
        if round_ is None:
            return

        pending = round_.pending_cards()
        if len(pending) != 2:
            return

        first, second = pending
        key = (round_.generation, first.id, second.id)
        if key in self._pending_pairs:
            return

        self._pending_pairs.add(key)
        self._call_later(self.config.resolution_delay, self._resolve_pair, round_, first, second, key)
        self._emit(Event(
            EventType.PAIR_SCHEDULED,
            {"card_ids": [first.id, second.id]},
            generation=round_.generation,
        ))

    def _watch_completion(self) -> None:
        round_ = self.round
        if round_ is None or not round_.is_complete:
            return
        if self._reload_scheduled_for == round_.generation:
            return

        self._reload_scheduled_for = round_.generation
        logger.info("Round %d cleared, re-dealing", round_.generation)
        self._call_later(self.config.reload_delay, self._reload_round, round_)
        self._emit(Event(EventType.ROUND_COMPLETED, generation=round_.generation))

    # =========================================================================
    # Deferred actions
    # =========================================================================

    def _resolve_pair(self, round_: Round, first: Card, second: Card, key: tuple[int, int, int]) -> None:
        self._pending_pairs.discard(key)
        if self.round is not round_:
            return

        if first.matches(second):
            first.disable()
            second.disable()
            event_type = EventType.CARDS_MATCHED
        else:
            for card in (first, second):
                if not card.disabled:
                    card.flipped = False
            event_type = EventType.CARDS_REVERTED

        logger.debug(
            "Round %d: %s %d/%d (%s, %s)",
            round_.generation, event_type.name, first.id, second.id, first.name, second.name
        )
        self._emit(Event(
            event_type,
            {"card_ids": [first.id, second.id]},
            generation=round_.generation,
        ))

    def _reload_round(self, round_: Round) -> None:
        if self.round is not round_:
            return
        self.reload()
