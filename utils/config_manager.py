from typing import Any, Dict, Optional

from models.settings import (
    DEFAULT_SYMBOLS,
    AccountSettings,
    GraduationThresholds,
    LearningSettings,
    SchedulerSettings,
    ScamFilterSettings,
)


class ConfigManager:
    def __init__(self, config: Dict[str, Any]):
        self.config = config

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def get_symbols(self) -> list:
        return self.config.get("SYMBOLS") or self.config.get("symbols") or list(DEFAULT_SYMBOLS)

    def get_account_settings(self) -> AccountSettings:
        return AccountSettings(**(self.config.get("ACCOUNT") or {}))

    def get_scheduler_settings(self) -> SchedulerSettings:
        return SchedulerSettings(**(self.config.get("SCHEDULER") or {}))

    def get_learning_settings(self) -> LearningSettings:
        return LearningSettings(**(self.config.get("LEARNING") or {}))

    def get_graduation_thresholds(self) -> GraduationThresholds:
        return GraduationThresholds(**(self.config.get("GRADUATION") or {}))

    def get_scam_filter_settings(self) -> ScamFilterSettings:
        return ScamFilterSettings(**(self.config.get("SCAM_FILTER") or {}))

    def get_telegram(self) -> Dict[str, Optional[str]]:
        return self.config.get("TELEGRAM") or {}

    def get_database_path(self) -> Optional[str]:
        return (self.config.get("DATABASE") or {}).get("path")
