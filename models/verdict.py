from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Verdict:
    is_scam: bool
    is_honeypot: bool
    confidence: float
    warnings: List[str] = field(default_factory=list)
