"""
scheduler.py
------------
Periodic driver of the paper-trading simulation.

Every ``analysis_interval`` seconds it asks the signal generator for a
candidate per symbol, gates it, vets it with the scam filter, opens a trade
and schedules that trade's resolution after a random holding period. On a
slower ``graduation_interval`` it evaluates the graduation policy.

Stopping halts new passes only; scheduled resolutions still complete and post
their outcomes so the ledger stays consistent.
"""

from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum
from typing import Callable, Dict, List, Optional

from core.errors import NotFoundError, UnsupportedAssetError
from models.events import EngineEvent
from models.settings import DEFAULT_SYMBOLS, SchedulerSettings
from models.signal import Candidate
from models.trade import Mode, Trade
from modules.slippage_model import apply_entry_slippage, simulate_exit_price


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class SimulationScheduler:
    """Asynchronous candidate → trade → resolution loop."""

    def __init__(
        self,
        ledger,
        learning_model,
        policy,
        signal_generator,
        scam_filter,
        settings: Optional[SchedulerSettings] = None,
        *,
        symbols: Optional[List[str]] = None,
        bus=None,
        mode_provider: Optional[Callable[[], Mode]] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(self.__class__.__name__)

        self.ledger = ledger
        self.learning_model = learning_model
        self.policy = policy
        self.signal_generator = signal_generator
        self.scam_filter = scam_filter
        self.settings = settings or SchedulerSettings()
        self.symbols = list(symbols or DEFAULT_SYMBOLS)
        self.bus = bus
        self.mode_provider = mode_provider or (lambda: Mode.PAPER)
        self.rng = rng or random.Random()

        self._stop_event: Optional[asyncio.Event] = None
        self._loops: List[asyncio.Task] = []
        self._pending: Dict[str, asyncio.Task] = {}
        self._ready_announced = False

        self.metrics = {
            "passes": 0,
            "skipped_passes": 0,
            "candidates": 0,
            "blocked": 0,
            "opened": 0,
            "resolved": 0,
        }

    # -------------------------------------------------------------------- #
    # State machine
    # -------------------------------------------------------------------- #
    @property
    def state(self) -> SchedulerState:
        if self._stop_event is not None and not self._stop_event.is_set():
            return SchedulerState.RUNNING
        return SchedulerState.STOPPED

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(self) -> bool:
        """stopped → running. Must be called from inside the event loop."""
        if self.is_running:
            return True
        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._loops = [
            loop.create_task(self._analysis_loop(stop_event), name="analysis-loop"),
            loop.create_task(self._graduation_loop(stop_event), name="graduation-loop"),
        ]
        self.logger.info(
            "✅ Scheduler started – analysing %s every %ss",
            self.symbols,
            self.settings.analysis_interval,
        )
        return True

    def stop(self) -> bool:
        """running → stopped. The in-flight pass finishes, resolutions continue."""
        if self._stop_event is not None and not self._stop_event.is_set():
            self._stop_event.set()
            self.logger.info("⏹️ Scheduler stopped (%d resolutions pending)", len(self._pending))
        return True

    async def join(self) -> None:
        """Wait for the periodic loops to exit after ``stop()``."""
        if self._loops:
            await asyncio.gather(*self._loops, return_exceptions=True)

    # -------------------------------------------------------------------- #
    # Periodic loops
    # -------------------------------------------------------------------- #
    async def _sleep(self, stop_event: asyncio.Event, seconds: float) -> None:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    async def _analysis_loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await self.run_cycle()
            except Exception:  # noqa: BLE001 (a bad pass must not kill the driver)
                self.metrics["skipped_passes"] += 1
                self.logger.exception("Analysis pass failed – skipping cycle")
            await self._sleep(stop_event, self.settings.analysis_interval)

    async def _graduation_loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self._sleep(stop_event, self.settings.graduation_interval)
            if stop_event.is_set():
                return
            try:
                self.check_graduation()
            except Exception:  # noqa: BLE001
                self.logger.exception("Graduation check failed")

    # -------------------------------------------------------------------- #
    # One analysis pass
    # -------------------------------------------------------------------- #
    async def run_cycle(self) -> List[Trade]:
        """Evaluate every tracked symbol once; returns the trades opened."""
        self.metrics["passes"] += 1
        opened = []
        for symbol in self.symbols:
            candidate = self.signal_generator.generate(symbol)
            self.metrics["candidates"] += 1
            trade = self.evaluate_candidate(candidate)
            if trade is not None:
                opened.append(trade)
        return opened

    def should_trade(self, candidate: Candidate) -> bool:
        # the rarity gate models "don't trade every tick"
        return (
            candidate.confidence > self.settings.min_confidence
            and self.rng.random() < self.settings.trade_probability
        )

    def evaluate_candidate(self, candidate: Candidate) -> Optional[Trade]:
        if not self.should_trade(candidate):
            return None

        try:
            verdict = self.scam_filter.vet(candidate.asset_id, candidate.symbol)
        except UnsupportedAssetError as exc:
            self.logger.warning("Skipping %s: %s", candidate.symbol, exc)
            return None

        if verdict.is_scam:
            self.metrics["blocked"] += 1
            self._publish(
                EngineEvent.ASSET_BLOCKED,
                {"asset_id": candidate.asset_id, "symbol": candidate.symbol, "verdict": verdict},
            )
            return None

        return self.open_trade(candidate)

    # -------------------------------------------------------------------- #
    # Trade lifecycle
    # -------------------------------------------------------------------- #
    def open_trade(self, candidate: Candidate, *, delay: Optional[float] = None) -> Trade:
        """Fill ``candidate`` with entry slippage and schedule its resolution."""
        filled_price = apply_entry_slippage(
            candidate.price, candidate.side, self.settings.max_slippage, self.rng
        )
        filled = candidate.model_copy(update={"price": filled_price})
        trade = self.ledger.open(filled, mode=self.mode_provider())
        self.metrics["opened"] += 1
        self._publish(EngineEvent.TRADE_OPENED, trade)
        self.schedule_resolution(trade, delay=delay)
        return trade

    def schedule_resolution(self, trade: Trade, delay: Optional[float] = None) -> asyncio.Task:
        if delay is None:
            delay = self.rng.uniform(
                self.settings.resolution_delay_min, self.settings.resolution_delay_max
            )
        task = asyncio.get_running_loop().create_task(
            self._resolve_after(trade.id, delay), name=f"resolve-{trade.id}"
        )
        self._pending[trade.id] = task
        task.add_done_callback(lambda _t, tid=trade.id: self._pending.pop(tid, None))
        self.logger.debug("Resolution of %s scheduled in %.1fs", trade.id, delay)
        return task

    async def _resolve_after(self, trade_id: str, delay: float) -> Optional[Trade]:
        await asyncio.sleep(delay)
        try:
            return self.resolve(trade_id)
        except NotFoundError:
            self.logger.warning("Trade %s was already closed – nothing to resolve", trade_id)
        except Exception:  # noqa: BLE001
            self.logger.exception("Failed to resolve trade %s", trade_id)
        return None

    def resolve(self, trade_id: str) -> Trade:
        """Close routine: draw an exit price, settle, learn, notify."""
        trade = self.ledger.get(trade_id)
        exit_price = simulate_exit_price(
            trade.entry_price, self.settings.exit_price_variation, self.rng
        )
        closed = self.ledger.close(trade_id, exit_price)
        self.learning_model.observe(closed)
        self.metrics["resolved"] += 1
        self._publish(EngineEvent.TRADE_CLOSED, closed)
        return closed

    # -------------------------------------------------------------------- #
    # Pending resolutions
    # -------------------------------------------------------------------- #
    def pending_resolutions(self) -> List[str]:
        return list(self._pending)

    async def wait_for_resolutions(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending.values()), return_exceptions=True)

    async def cancel_resolutions(self) -> int:
        tasks = list(self._pending.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            self.logger.info("Cancelled %d pending resolutions", len(tasks))
        return len(tasks)

    # -------------------------------------------------------------------- #
    # Graduation
    # -------------------------------------------------------------------- #
    def check_graduation(self) -> bool:
        performance = self.ledger.performance(Mode.PAPER)
        ready = self.policy.can_graduate(performance)
        if ready and not self._ready_announced:
            self.logger.info("🎓 AI ready for live trading!")
            self._publish(EngineEvent.READY_FOR_LIVE, performance)
        self._ready_announced = ready
        return ready

    def _publish(self, topic: EngineEvent, payload) -> None:
        if self.bus is not None:
            self.bus.publish(topic, payload)
