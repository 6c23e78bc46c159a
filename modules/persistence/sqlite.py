"""
persistence/sqlite.py
---------------------
Simple SQLite journal for simulated trades.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import List

from models.trade import Mode, Side, Trade, TradeState

SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS trades (
    id          TEXT PRIMARY KEY,
    symbol      TEXT,
    side        TEXT,
    size        REAL,
    entry_price REAL,
    confidence  REAL,
    opened_at   INTEGER,
    leverage    REAL,
    mode        TEXT,
    state       TEXT,
    exit_price  REAL,
    pnl         REAL,
    closed_at   INTEGER
);
"""


class SQLitePersistence:
    def __init__(self, db_path: str = "paperbot.db"):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.executescript(SCHEMA)
        self.conn.commit()
        self._lock = threading.Lock()

    # ---------------------------- WRITES --------------------------------- #
    def upsert_trade(self, trade: Trade) -> None:
        with self._lock:
            self.conn.execute(
                """
                INSERT INTO trades (id, symbol, side, size, entry_price, confidence,
                                    opened_at, leverage, mode, state, exit_price, pnl, closed_at)
                VALUES (:id, :symbol, :side, :size, :entry_price, :confidence,
                        :opened_at, :leverage, :mode, :state, :exit_price, :pnl, :closed_at)
                ON CONFLICT(id) DO UPDATE SET
                  state = excluded.state,
                  exit_price = excluded.exit_price,
                  pnl = excluded.pnl,
                  closed_at = excluded.closed_at
                WHERE trades.state != 'closed'
                """,
                trade.to_dict(),
            )
            self.conn.commit()

    # ---------------------------- READS ---------------------------------- #
    def load_trades(self) -> List[Trade]:
        with self._lock:
            rows = self.conn.execute("SELECT * FROM trades ORDER BY opened_at").fetchall()
        return [
            Trade(
                id=row["id"],
                symbol=row["symbol"],
                side=Side(row["side"]),
                size=row["size"],
                entry_price=row["entry_price"],
                confidence=row["confidence"],
                opened_at=row["opened_at"],
                leverage=row["leverage"],
                mode=Mode(row["mode"]),
                state=TradeState(row["state"]),
                exit_price=row["exit_price"],
                pnl=row["pnl"],
                closed_at=row["closed_at"],
            )
            for row in rows
        ]

    def close(self) -> None:
        self.conn.close()
