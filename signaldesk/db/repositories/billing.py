from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from signaldesk.db import models


class SubscriptionRepository:
    """Read access to subscriptions with their pair and payment loaded."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_subscriptions(self, status: str | None = None) -> list[models.Subscription]:
        stmt = (
            select(models.Subscription)
            .options(
                selectinload(models.Subscription.pair),
                selectinload(models.Subscription.payment),
            )
            .order_by(models.Subscription.created_at.desc())
        )
        if status:
            stmt = stmt.where(models.Subscription.status == status.upper())
        return list(self.session.scalars(stmt))


class PaymentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_payments(self) -> list[models.Payment]:
        stmt = select(models.Payment).order_by(models.Payment.created_at.desc())
        return list(self.session.scalars(stmt))
