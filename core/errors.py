"""Recoverable failures raised by the engine's public operations."""


class EngineError(Exception):
    """Base class for every engine failure reported to callers."""


class NotFoundError(EngineError, KeyError):
    def __init__(self, trade_id: str):
        super().__init__(trade_id)
        self.trade_id = trade_id

    def __str__(self) -> str:
        return f"no open trade with id {self.trade_id!r}"


class InvalidModeTransitionError(EngineError):
    pass


class UnsupportedAssetError(EngineError, ValueError):
    pass
