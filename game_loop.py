"""
The per-tick game loop: queue casts, resolve them against the shared pool, advance the clock
"""
import logging
import random
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from bonuses import BonusResolver, apply_depth_bonuses
from config import Config
from game_clock import GameClock
from game_logic import CatchPoolBuilder, EventArbiter, PersonalDrawEngine
from models import (
    CastRejected,
    CatchRecord,
    DrawResult,
    NoCatch,
    NoUnclaimedCatch,
    PendingCast,
    TickReport,
)
from persistence import record_from_dict
from player_service import hand_contains
from sampling import DepthSelector
from static_data import CardTable

logger = logging.getLogger(__name__)


class CastQueue:
    """
    Pending casts, at most one per player. Draining swaps in an empty queue.

    A drained player stays in flight until `release` is called, so they
    cannot cast again before their catch is recorded or dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._casts: List[PendingCast] = []
        self._in_flight: Set[str] = set()

    def __len__(self) -> int:
        with self._lock:
            return len(self._casts)

    def _holds(self, player_id: str) -> bool:
        return player_id in self._in_flight or any(c.player_id == player_id for c in self._casts)

    def has_player(self, player_id: str) -> bool:
        with self._lock:
            return self._holds(player_id)

    def enqueue(self, cast: PendingCast):
        with self._lock:
            if self._holds(cast.player_id):
                raise CastRejected('duplicate_pending', 'A cast is already pending for this player')
            self._casts.append(cast)

    def drain(self) -> List[PendingCast]:
        with self._lock:
            drained, self._casts = self._casts, []
            self._in_flight.update(c.player_id for c in drained)
        return drained

    def release(self, player_id: str):
        with self._lock:
            self._in_flight.discard(player_id)


class GameLoop:
    """Owns the cast queue, the clock and the event state"""

    def __init__(self, static_data, catch_store, players,
                 sample_size: int = Config.POOL_SAMPLE_SIZE,
                 rng: Optional[random.Random] = None,
                 clock: Optional[GameClock] = None):
        self.static_data = static_data
        self.catch_store = catch_store
        self.players = players
        self.sample_size = sample_size

        rng = rng or random.Random()
        self.depth_selector = DepthSelector(rng)
        self.arbiter = EventArbiter(rng)
        self.pool_builder = CatchPoolBuilder(rng)
        self.draw_engine = PersonalDrawEngine(rng)

        self.clock = clock or GameClock()
        self.queue = CastQueue()
        self.unclaimed: List[CatchRecord] = []
        self.history: List[CatchRecord] = []
        self._catch_lock = threading.Lock()
        self._tick_lock = threading.Lock()

    @property
    def current_event(self) -> Optional[str]:
        return self.clock.state.last_event

    def _safe(self, action: str, fn: Callable, *args) -> Any:
        """Run a collaborator call; failures are logged and never stop the tick"""
        try:
            return fn(*args)
        except Exception:
            logger.exception("Failed to %s", action)
            return None

    def read_cards(self) -> CardTable:
        cards = self._safe("read card data", self.static_data.read_cards)
        return cards if cards is not None else CardTable({})

    def read_fish(self) -> Dict:
        fish = self._safe("read fish data", self.static_data.read_fish)
        return fish if fish is not None else {}

    def restore_unclaimed(self) -> int:
        """Reload unclaimed catches kept by the store from a previous run"""
        rows = self._safe("load unclaimed catches", self.catch_store.load_unclaimed) or []
        restored = []
        for row in rows:
            try:
                restored.append(record_from_dict(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable unclaimed catch: %s", e)
        with self._catch_lock:
            self.unclaimed.extend(restored)
        logger.info("Restored %d unclaimed catches", len(restored))
        return len(restored)

    def has_unclaimed(self, player_id: str) -> bool:
        with self._catch_lock:
            return any(r.player_id == player_id for r in self.unclaimed)

    @staticmethod
    def _validate_shape(card_indices) -> List[int]:
        if not isinstance(card_indices, (list, tuple)):
            raise CastRejected('invalid_cast', 'Cast must be a list of card indices')
        if not 0 < len(card_indices) <= Config.HAND_SIZE:
            raise CastRejected('invalid_cast', f'Cast must hold 1 to {Config.HAND_SIZE} slots')
        for index in card_indices:
            if not isinstance(index, int) or isinstance(index, bool) or index < Config.EMPTY_SLOT:
                raise CastRejected('invalid_cast', f'Invalid card index: {index!r}')
        if all(index == Config.EMPTY_SLOT for index in card_indices):
            raise CastRejected('invalid_cast', 'Cast must play at least one card')
        return list(card_indices)

    def submit_cast(self, player_id: str, card_indices: Sequence[int],
                    hand: Optional[Sequence[int]] = None) -> PendingCast:
        """
        Queue a cast for the next tick.

        Raises CastRejected when the cast is malformed, the player already has
        a cast pending or an unclaimed catch, or (if `hand` is given) the cards
        are not in the player's hand.
        """
        cast = self._validate_shape(card_indices)

        if self.has_unclaimed(player_id):
            raise CastRejected('unclaimed_outstanding', 'Claim your last catch before casting again')
        if self.queue.has_player(player_id):
            raise CastRejected('duplicate_pending', 'A cast is already pending for this player')
        if hand is not None and not hand_contains(hand, cast):
            raise CastRejected('hand_mismatch', 'Cast uses cards that are not in your hand')

        bonuses = BonusResolver(self.read_cards()).resolve(cast)
        depth = apply_depth_bonuses(self.depth_selector.pick(), bonuses)

        pending = PendingCast(player_id=player_id, cast=cast, depth=depth, bonuses=bonuses)
        self.queue.enqueue(pending)
        logger.debug("Queued cast for %s: cast=%s depth=%s bonuses=%d",
                     player_id, cast, depth, len(bonuses))

        self._safe("mark cast pending", self.players.mark_cast_pending, player_id, cast)
        return pending

    def claim_catch(self, player_id: str) -> CatchRecord:
        """Remove and return the player's oldest unclaimed catch"""
        with self._catch_lock:
            for i, record in enumerate(self.unclaimed):
                if record.player_id == player_id:
                    del self.unclaimed[i]
                    break
            else:
                raise NoUnclaimedCatch(player_id)

        self._safe("remove unclaimed catch", self.catch_store.remove_unclaimed, record)
        self._safe("reset player catch", self.players.clear_catch, player_id)
        return record

    def _record_catch(self, cast: PendingCast, result: DrawResult, phase: str,
                      event: Optional[str]) -> CatchRecord:
        record = CatchRecord(
            player_id=cast.player_id,
            cast=list(cast.cast),
            depth=cast.depth,
            fish_type=result.fish_type,
            fish_stats=result.stats,
            event=event,
            phase=phase,
            weight=result.weight,
            length=result.length,
        )
        with self._catch_lock:
            self.unclaimed.append(record)
            self.history.append(record)

        self._safe("persist catch history", self.catch_store.persist_history, record)
        self._safe("persist unclaimed catch", self.catch_store.persist_unclaimed, record)
        self._safe("notify player", self.players.notify_player_has_catch, cast.player_id, record.summary())
        return record

    def tick(self) -> TickReport:
        """
        Run one tick. Casts resolve under the phase and event already in
        effect; the event voted for now starts on the next tick.
        """
        with self._tick_lock:
            phase = self.clock.phase
            hour = self.clock.hour
            event = self.clock.state.last_event

            casts = self.queue.drain()

            next_event = self.arbiter.choose_next_event(casts)
            self.clock.state.next_event = next_event

            catches: List[CatchRecord] = []
            dropped = 0
            try:
                if casts:
                    pool = self.pool_builder.build_pool(self.read_fish(), phase, event, self.sample_size)
                    for cast in casts:
                        result = self.draw_engine.draw(pool, cast.bonuses)
                        if isinstance(result, NoCatch):
                            dropped += 1
                            logger.warning("No catch for %s (%s); cast dropped", cast.player_id, result.reason)
                        else:
                            catches.append(self._record_catch(cast, result, phase, event))
            finally:
                # A drained player may cast again only once their cast is settled
                for cast in casts:
                    self.queue.release(cast.player_id)

            self.clock.state.last_event = next_event
            self.clock.state.next_event = None

            clock_tick = self.clock.tick()
            if clock_tick.wrapped:
                card_indices = self.read_cards().indices()
                count = self._safe("reset player decks", self.players.reset_all_decks, card_indices)
                logger.info("New day: reset decks for %s players", count)

            logger.info(
                "Tick hour=%d phase=%s event=%s casts=%d catches=%d dropped=%d next_event=%s",
                hour, phase, event, len(casts), len(catches), dropped, next_event,
            )
            return TickReport(
                hour=hour,
                phase=phase,
                event=event,
                next_event=next_event,
                casts=len(casts),
                catches=catches,
                dropped=dropped,
                clock=clock_tick,
            )

    def status(self) -> Dict[str, Any]:
        with self._catch_lock:
            unclaimed = len(self.unclaimed)
        return {
            'hour': self.clock.hour,
            'phase': self.clock.phase,
            'event': self.current_event,
            'pending_casts': len(self.queue),
            'unclaimed_catches': unclaimed,
        }


class TickRunner:
    """Background thread firing GameLoop.tick at a fixed interval"""

    def __init__(self, game_loop: GameLoop, interval_seconds: float = Config.TICK_INTERVAL_SECONDS):
        self.game_loop = game_loop
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            logger.warning("Tick runner already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="game_tick_thread", daemon=True)
        self._thread.start()
        logger.info("Tick runner started (interval=%.1fs)", self.interval_seconds)

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Tick runner stopped")

    def _run(self):
        while not self._stop.wait(self.interval_seconds):
            try:
                self.game_loop.tick()
            except Exception:
                logger.exception("Game tick failed")
