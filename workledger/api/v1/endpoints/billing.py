"""API endpoints for billing events.

The payment integration posts normalized subscription events here. Signature
verification happens upstream; this endpoint only applies effects.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.api import deps
from workledger.api.deps import Inject
from workledger.api.router import TrailingSlashRouter
from workledger.core.context import SystemContext
from workledger.core.shared_models import AuthMethod
from workledger.domains.billing.protocols import SubscriptionSyncProtocol

router = TrailingSlashRouter()


@router.post("/events", response_model=schemas.BillingEventAck)
async def receive_billing_event(
    *,
    db: AsyncSession = Depends(deps.get_db),
    event: schemas.BillingEvent,
    ctx: SystemContext = deps.get_system_context(
        "subscription_sync", source=AuthMethod.BILLING_EVENT
    ),
    subscription_sync: SubscriptionSyncProtocol = Inject(SubscriptionSyncProtocol),
) -> schemas.BillingEventAck:
    """Apply one billing event.

    Always acknowledged, including events skipped for an unknown customer or
    price, so the provider does not retry them.
    """
    return await subscription_sync.handle(db, event, ctx)
