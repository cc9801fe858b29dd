# src/core/subscriptions/__init__.py
"""
Модуль подписок и квоты вывозов.
"""

from src.core.subscriptions.ledger import SubscriptionQuotaLedger
from src.core.subscriptions.models import PLAN_TERMS, PlanTerms, Subscription, SubscriptionPlan
from src.core.subscriptions.repository import SubscriptionRepository

__all__ = [
    "Subscription",
    "SubscriptionPlan",
    "PlanTerms",
    "PLAN_TERMS",
    "SubscriptionRepository",
    "SubscriptionQuotaLedger",
]
