# rivalwatch/core/detect/__init__.py
from .classifier import NO_CHANGE, ChangeClassifier, ClassifierConfig, parse_classification
from .fallback import FALLBACK_BACKEND, fallback_classification, infer_change_type
from .priority import (
    NotificationPlan,
    notification_delay,
    notification_priority,
    notification_type,
    plan_notification,
)
from .prompt import build_prompt, word_count_ratio

__all__ = [
    "ChangeClassifier",
    "ClassifierConfig",
    "NO_CHANGE",
    "parse_classification",
    "build_prompt",
    "word_count_ratio",
    "FALLBACK_BACKEND",
    "infer_change_type",
    "fallback_classification",
    "NotificationPlan",
    "notification_type",
    "notification_priority",
    "notification_delay",
    "plan_notification",
]
