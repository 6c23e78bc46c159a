"""
scam_filter.py
--------------
Vets a candidate asset before the engine commits capital to it.

An asset is flagged when any of these hold:
1. its identifier is on the known-bad list (exact, case-insensitive),
2. its symbol contains a red-flag token (``test``, ``rug`` ...),
3. a random scan flag fires (stand-in for an on-chain honeypot check).

Every positive verdict bumps ``blocked_count``; the counter only grows.
"""
from __future__ import annotations

import logging
import random
import re
import threading
from typing import Iterable, Optional

from core.errors import UnsupportedAssetError
from models.settings import ScamFilterSettings
from models.verdict import Verdict

logger = logging.getLogger(__name__)

_ASSET_ID_RE = re.compile(r"^[A-Za-z0-9_.:/-]+$")


def _validate_identifiers(asset_id: object, symbol: object) -> None:
    if not isinstance(asset_id, str) or not _ASSET_ID_RE.match(asset_id):
        raise UnsupportedAssetError(f"malformed asset identifier: {asset_id!r}")
    if not isinstance(symbol, str) or not symbol.strip():
        raise UnsupportedAssetError(f"malformed asset symbol: {symbol!r}")


class ScamFilter:
    def __init__(
        self,
        settings: Optional[ScamFilterSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or ScamFilterSettings()
        self.rng = rng or random.Random()
        self._known_scams = {a.lower() for a in self.settings.known_scams}
        self._red_flags = [t.lower() for t in self.settings.red_flag_tokens]
        self._blocked = 0
        self._lock = threading.Lock()

    @property
    def blocked_count(self) -> int:
        return self._blocked

    def add_known_scam(self, asset_id: str) -> None:
        _validate_identifiers(asset_id, asset_id)
        self._known_scams.add(asset_id.lower())

    def add_known_scams(self, asset_ids: Iterable[str]) -> None:
        for asset_id in asset_ids:
            self.add_known_scam(asset_id)

    def vet(self, asset_id: str, symbol: str) -> Verdict:
        """Return a verdict for ``asset_id`` / ``symbol``.

        Raises ``UnsupportedAssetError`` when either identifier is malformed.
        """
        _validate_identifiers(asset_id, symbol)

        warnings = []
        if asset_id.lower() in self._known_scams:
            warnings.append(f"{asset_id} is on the known scam list")

        lowered = symbol.lower()
        hits = [t for t in self._red_flags if t in lowered]
        if hits:
            warnings.append(f"suspicious symbol {symbol} (matched {', '.join(hits)})")

        flagged_by_scan = self.rng.random() < self.settings.random_flag_probability
        if flagged_by_scan:
            warnings.append("heuristic scan flagged a possible honeypot")

        is_scam = bool(warnings)
        if is_scam:
            with self._lock:
                self._blocked += 1
            logger.warning("🛡️ SCAM DETECTED: %s (%s) – %s", symbol, asset_id, "; ".join(warnings))

        return Verdict(
            is_scam=is_scam,
            is_honeypot=flagged_by_scan,
            confidence=0.9 if is_scam else 0.1,
            warnings=warnings,
        )
