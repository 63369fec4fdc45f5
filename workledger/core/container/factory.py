"""Container factory.

Builds the production container from settings. Every service is constructed
here, once, at startup; nothing in the domains reaches for the global
container.
"""

from workledger.core.config import Settings
from workledger.core.container.container import Container
from workledger.domains.access.policy import RoleAccessPolicy
from workledger.domains.billing.cycle_resetter import CycleResetter
from workledger.domains.billing.price_lookup import PriceLookup
from workledger.domains.billing.repository import PlanRepository
from workledger.domains.billing.subscription_sync import SubscriptionSync
from workledger.domains.clients.repository import ClientRepository
from workledger.domains.tasks.locks import ClientLockRegistry
from workledger.domains.tasks.repository import TaskRepository
from workledger.domains.tasks.sequencer import TaskSequencer
from workledger.domains.tasks.service import TaskService
from workledger.domains.tasks.state_machine import TaskStateMachine
from workledger.domains.usage.aggregator import UsageAggregator
from workledger.domains.usage.ledger import UsageLedger
from workledger.domains.usage.repository import UsageLogRepository
from workledger.domains.usage.service import UsageService


def create_container(settings: Settings) -> Container:
    """Build the container with production implementations.

    Args:
        settings: Application settings (from core/config)

    Returns:
        Fully constructed Container ready for use
    """
    # -----------------------------------------------------------------
    # Repositories (thin wrappers over the crud singletons)
    # -----------------------------------------------------------------
    task_repo = TaskRepository()
    client_repo = ClientRepository()
    usage_repo = UsageLogRepository()
    plan_repo = PlanRepository()

    access_policy = RoleAccessPolicy()

    # -----------------------------------------------------------------
    # Usage ledger
    # -----------------------------------------------------------------
    usage_ledger = UsageLedger(usage_repo=usage_repo, client_repo=client_repo, task_repo=task_repo)
    usage_aggregator = UsageAggregator(
        usage_repo=usage_repo,
        client_repo=client_repo,
        plan_repo=plan_repo,
        recap_days=settings.WEEKLY_RECAP_DAYS,
    )
    usage_service = UsageService(
        ledger=usage_ledger,
        aggregator=usage_aggregator,
        client_repo=client_repo,
        access=access_policy,
    )

    # -----------------------------------------------------------------
    # Tasks
    # One lock registry shared by the sequencer and the state machine so
    # reorders and transitions of the same client serialize.
    # -----------------------------------------------------------------
    locks = ClientLockRegistry()
    sequencer = TaskSequencer(task_repo=task_repo, client_repo=client_repo, locks=locks)
    state_machine = TaskStateMachine(
        task_repo=task_repo,
        client_repo=client_repo,
        sequencer=sequencer,
        ledger=usage_ledger,
        locks=locks,
        default_task_hours=settings.DEFAULT_TASK_HOURS,
    )
    task_service = TaskService(
        task_repo=task_repo,
        client_repo=client_repo,
        state_machine=state_machine,
        sequencer=sequencer,
        access=access_policy,
    )

    # -----------------------------------------------------------------
    # Billing
    # -----------------------------------------------------------------
    price_lookup = PriceLookup(
        plan_repo=plan_repo, price_references=settings.configured_price_references()
    )
    subscription_sync = SubscriptionSync(client_repo=client_repo, price_lookup=price_lookup)
    cycle_resetter = CycleResetter(client_repo=client_repo, mode=settings.CYCLE_RESET_MODE)

    return Container(
        task_service=task_service,
        usage_service=usage_service,
        usage_ledger=usage_ledger,
        usage_aggregator=usage_aggregator,
        subscription_sync=subscription_sync,
        cycle_resetter=cycle_resetter,
        price_lookup=price_lookup,
        access_policy=access_policy,
    )
