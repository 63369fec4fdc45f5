"""Dependency Injection Container.

The container is an immutable dataclass holding protocol implementations.
It has no construction logic; that belongs in the factory.

- Container serves, factory builds
- Fields are protocol types, so ``Inject(Protocol)`` can find them
- Tests construct it directly with fakes
"""

from dataclasses import dataclass, replace
from typing import Any

from workledger.domains.access.protocols import AccessPolicyProtocol
from workledger.domains.billing.protocols import (
    CycleResetterProtocol,
    PriceLookupProtocol,
    SubscriptionSyncProtocol,
)
from workledger.domains.tasks.protocols import TaskServiceProtocol
from workledger.domains.usage.protocols import (
    UsageAggregatorProtocol,
    UsageLedgerProtocol,
    UsageServiceProtocol,
)


@dataclass(frozen=True)
class Container:
    """Immutable container of every long-lived service the API resolves.

    Usage:
        # Production: built once by the factory at startup
        container = create_container(settings)

        # Tests: constructed directly with fakes or fake-backed services
        container = Container(task_service=..., usage_service=..., ...)

        # FastAPI endpoints
        @router.patch("/{task_id}")
        async def update(tasks: TaskServiceProtocol = Inject(TaskServiceProtocol)):
            ...
    """

    # Tasks
    task_service: TaskServiceProtocol

    # Usage ledger
    usage_service: UsageServiceProtocol
    usage_ledger: UsageLedgerProtocol
    usage_aggregator: UsageAggregatorProtocol

    # Billing
    subscription_sync: SubscriptionSyncProtocol
    cycle_resetter: CycleResetterProtocol
    price_lookup: PriceLookupProtocol

    # Authorization
    access_policy: AccessPolicyProtocol

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Example:
            test_container = container.replace(access_policy=FakeAccessPolicy())
        """
        return replace(self, **changes)
