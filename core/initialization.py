"""
core/initialization.py
----------------------
Loads configuration from .env, normalizes symbols, and wires all runtime
components with simple dependency‑injection (DI) overrides.
"""

from __future__ import annotations

import os
import logging
import random
from typing import Dict, Optional

from dotenv import load_dotenv

from core.engine import TradingEngine
from modules.graduation import GraduationPolicy
from modules.learning_model import LearningModel
from modules.ledger import TradeLedger
from modules.scam_filter import ScamFilter
from modules.scheduler import SimulationScheduler
from modules.strategy.heuristic import HeuristicSignalGenerator
from utils.config_manager import ConfigManager
from utils.config_validator import validate_config
from utils.event_bus import EventBus


def _split(raw: Optional[str]) -> list:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def _section(mapping: Dict[str, tuple]) -> Dict[str, object]:
    """Read ``{field: (ENV_NAME, cast)}``; unset variables keep model defaults."""
    out: Dict[str, object] = {}
    for field, (env_name, cast) in mapping.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            continue
        out[field] = cast(raw)
    return out


def load_configuration(env_path: str = "config.env") -> Dict:
    """
    Load settings from an .env-style file and return a structured config dict.
    """
    log = logging.getLogger(__name__)
    load_dotenv(dotenv_path=env_path)

    conf: Dict[str, object] = {
        "SYMBOLS": [s.upper() for s in _split(os.getenv("SYMBOLS", "BTC/USDT,ETH/USDT,SOL/USDT"))],
        "ACCOUNT": _section({"initial_balance": ("INITIAL_BALANCE", float)}),
        "SCHEDULER": _section({
            "analysis_interval": ("ANALYSIS_INTERVAL", float),
            "graduation_interval": ("GRADUATION_CHECK_INTERVAL", float),
            "min_confidence": ("MIN_CONFIDENCE", float),
            "trade_probability": ("TRADE_PROBABILITY", float),
            "resolution_delay_min": ("RESOLUTION_DELAY_MIN", float),
            "resolution_delay_max": ("RESOLUTION_DELAY_MAX", float),
            "exit_price_variation": ("EXIT_PRICE_VARIATION", float),
            "max_slippage": ("MAX_SLIPPAGE", float),
        }),
        "LEARNING": _section({
            "initial_confidence": ("LEARNING_INITIAL_CONFIDENCE", float),
            "confidence_step": ("LEARNING_CONFIDENCE_STEP", float),
            "confidence_ceiling": ("LEARNING_CONFIDENCE_CEILING", float),
            "target_trades": ("LEARNING_TARGET_TRADES", int),
            "target_win_rate": ("LEARNING_TARGET_WIN_RATE", float),
        }),
        "GRADUATION": _section({
            "min_closed_trades": ("GRADUATION_MIN_TRADES", int),
            "min_win_rate": ("GRADUATION_MIN_WIN_RATE", float),
            "min_total_pnl": ("GRADUATION_MIN_PROFIT", float),
        }),
        "SCAM_FILTER": _section({
            "known_scams": ("SCAM_KNOWN_ASSETS", _split),
            "red_flag_tokens": ("SCAM_RED_FLAGS", _split),
            "random_flag_probability": ("SCAM_RANDOM_FLAG_PROBABILITY", float),
        }),
        "TELEGRAM": {
            "token": os.getenv("TELEGRAM_TOKEN"),
            "chat_id": os.getenv("TELEGRAM_CHAT_ID"),
        },
        "DATABASE": {
            "path": os.getenv("DATABASE_PATH") or None,
        },
        "RANDOM_SEED": int(os.environ["RANDOM_SEED"]) if os.getenv("RANDOM_SEED") else None,
    }

    validate_config(conf)

    log.debug("Parsed SYMBOLS: %s", conf["SYMBOLS"])
    log.debug("Scheduler overrides: %s", conf["SCHEDULER"])
    return conf


def initialize_components(
    config: Dict,
    overrides: Optional[Dict[str, object]] = None,
    logger: Optional[logging.Logger] = None,
    ) -> Dict[str, object]:
    """
    Construct and wire together all runtime components (supports DI via overrides).

    Keys you can override:
    {"logger", "bus", "persistence", "ledger", "learning_model", "policy",
     "scam_filter", "signal_generator", "scheduler", "rng"}
    """
    overrides = overrides or {}
    config = ConfigManager(config)

    # 1) Logger
    from utils.logger import setup_logger
    logger = overrides.get("logger") or logger or setup_logger("PaperBot")

    seed = config.get("RANDOM_SEED")
    rng = overrides.get("rng") or random.Random(seed)

    # 2) Event bus + optional journal
    bus = overrides.get("bus") or EventBus()
    persistence = overrides.get("persistence")
    if persistence is None and config.get_database_path():
        from modules.persistence.sqlite import SQLitePersistence  # lazy: optional
        persistence = SQLitePersistence(config.get_database_path())

    # 3) Core state
    ledger = overrides.get("ledger") or TradeLedger(persistence=persistence)
    learning_model = overrides.get("learning_model") or LearningModel(
        ledger, config.get_learning_settings()
    )
    policy = overrides.get("policy") or GraduationPolicy(config.get_graduation_thresholds())
    scam_filter = overrides.get("scam_filter") or ScamFilter(
        config.get_scam_filter_settings(), rng=rng
    )
    signal_generator = overrides.get("signal_generator") or HeuristicSignalGenerator(rng=rng)

    # 4) Scheduler
    scheduler = overrides.get("scheduler") or SimulationScheduler(
        ledger,
        learning_model,
        policy,
        signal_generator,
        scam_filter,
        config.get_scheduler_settings(),
        symbols=config.get_symbols(),
        bus=bus,
        rng=rng,
        logger=logger,
    )

    engine = TradingEngine(
        ledger=ledger,
        learning_model=learning_model,
        policy=policy,
        scam_filter=scam_filter,
        signal_generator=signal_generator,
        scheduler=scheduler,
        bus=bus,
        account=config.get_account_settings(),
        persistence=persistence,
    )

    logger.info("✅ Logger initialized.")
    logger.info("✅ Signal generator initialized: %s", signal_generator.__class__.__name__)
    logger.info("✅ Ledger initialized (journal: %s).", "on" if persistence else "off")
    logger.info("✅ Scheduler initialized.")

    return {
        "logger": logger,
        "bus": bus,
        "persistence": persistence,
        "ledger": ledger,
        "learning_model": learning_model,
        "policy": policy,
        "scam_filter": scam_filter,
        "signal_generator": signal_generator,
        "scheduler": scheduler,
        "engine": engine,
    }
