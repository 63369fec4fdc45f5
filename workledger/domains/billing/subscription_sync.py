"""Subscription sync: applies normalized payment events to clients.

Handlers only ever set terminal values (plan, capacity, cycle start), so a
replayed or reordered event converges to the same state.
"""

from datetime import date
from typing import Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.core.logging import ContextualLogger
from workledger.domains.billing.protocols import PriceLookupProtocol, SubscriptionSyncProtocol
from workledger.domains.billing.types import DEFAULT_CLIENT_NAME, is_deactivating
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.usage.types import utc_today
from workledger.models import Client
from workledger.schemas.billing import BillingEventType

Handler = Callable[
    [AsyncSession, schemas.BillingEvent, ContextualLogger], Awaitable[Optional[str]]
]


class SubscriptionSync(SubscriptionSyncProtocol):
    """Dispatches billing events to one handler per event type.

    A handler returns None when it applied the event, or a short reason when
    it skipped it.
    """

    def __init__(
        self,
        client_repo: ClientRepositoryProtocol,
        price_lookup: PriceLookupProtocol,
        today: Callable[[], date] = utc_today,
    ) -> None:
        """Initialize with collaborators and a UTC clock for cycle starts."""
        self._client_repo = client_repo
        self._price_lookup = price_lookup
        self._today = today

        self.handlers: dict[BillingEventType, Handler] = {
            BillingEventType.CHECKOUT_COMPLETED: self._handle_checkout_completed,
            BillingEventType.SUBSCRIPTION_UPDATED: self._handle_subscription_updated,
            BillingEventType.SUBSCRIPTION_DELETED: self._handle_capacity_off,
            BillingEventType.INVOICE_PAID: self._handle_invoice_paid,
            BillingEventType.INVOICE_PAYMENT_FAILED: self._handle_capacity_off,
        }

    async def handle(
        self, db: AsyncSession, event: schemas.BillingEvent, ctx: BaseContext
    ) -> schemas.BillingEventAck:
        """Apply one event and acknowledge it, whether applied or skipped."""
        log = ctx.logger.with_context(
            event_type=event.type.value, customer_reference=event.customer_reference
        )
        handler = self.handlers.get(event.type)
        if handler is None:
            log.info("Ignoring unhandled billing event")
            return schemas.BillingEventAck(applied=False, detail="unhandled event type")

        skipped = await handler(db, event, log)
        if skipped:
            log.warning(f"Billing event skipped: {skipped}")
            return schemas.BillingEventAck(applied=False, detail=skipped)

        log.info("Billing event applied")
        return schemas.BillingEventAck(applied=True)

    async def _handle_checkout_completed(
        self, db: AsyncSession, event: schemas.BillingEvent, log: ContextualLogger
    ) -> Optional[str]:
        plan = await self._price_lookup.resolve(db, event.price_reference)
        if plan is None:
            return f"unknown price reference {event.price_reference!r}"

        existing = await self._client_repo.get_by_customer_ref(db, event.customer_reference)
        if existing is not None:
            # Replayed checkout: converge on the same plan instead of duplicating
            await self._client_repo.update(
                db,
                db_obj=existing,
                obj_in=schemas.ClientUpdate(
                    plan_code=plan.code, hours_monthly=plan.hours_monthly
                ),
            )
            return None

        client = await self._client_repo.create(
            db,
            obj_in=schemas.ClientCreate(
                name=event.client_name or DEFAULT_CLIENT_NAME,
                plan_code=plan.code,
                hours_monthly=plan.hours_monthly,
                cycle_start=self._today(),
                payment_customer_ref=event.customer_reference,
            ),
        )
        log.info(f"Client {client.id} created on plan {plan.code}")
        return None

    async def _handle_subscription_updated(
        self, db: AsyncSession, event: schemas.BillingEvent, log: ContextualLogger
    ) -> Optional[str]:
        if is_deactivating(event.subscription_status):
            return await self._handle_capacity_off(db, event, log)

        client = await self._client_repo.get_by_customer_ref(db, event.customer_reference)
        if client is None:
            return "no client for customer reference"

        plan = await self._price_lookup.resolve(db, event.price_reference)
        if plan is None:
            return f"unknown price reference {event.price_reference!r}"

        await self._set(
            db, client, schemas.ClientUpdate(plan_code=plan.code, hours_monthly=plan.hours_monthly)
        )
        return None

    async def _handle_capacity_off(
        self, db: AsyncSession, event: schemas.BillingEvent, log: ContextualLogger
    ) -> Optional[str]:
        client = await self._client_repo.get_by_customer_ref(db, event.customer_reference)
        if client is None:
            return "no client for customer reference"
        await self._set(db, client, schemas.ClientUpdate(hours_monthly=0))
        return None

    async def _handle_invoice_paid(
        self, db: AsyncSession, event: schemas.BillingEvent, log: ContextualLogger
    ) -> Optional[str]:
        client = await self._client_repo.get_by_customer_ref(db, event.customer_reference)
        if client is None:
            return "no client for customer reference"
        await self._set(
            db, client, schemas.ClientUpdate(cycle_start=self._today(), hours_used_month=0.0)
        )
        return None

    async def _set(self, db: AsyncSession, client: Client, update: schemas.ClientUpdate) -> None:
        await self._client_repo.update(db, db_obj=client, obj_in=update)
