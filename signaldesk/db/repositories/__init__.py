"""Repository package exposing domain-specific database helpers."""

from .billing import PaymentRepository, SubscriptionRepository
from .pairs import PairRepository

__all__ = ["PairRepository", "SubscriptionRepository", "PaymentRepository"]
