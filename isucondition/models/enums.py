from enum import Enum


class ConditionLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
