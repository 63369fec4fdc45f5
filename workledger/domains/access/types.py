"""Access domain types and pure rules."""

from enum import Enum

from workledger.core.shared_models import PrincipalRole


class AccessAction(str, Enum):
    """Operations that are subject to the access policy."""

    TASK_READ = "task_read"
    TASK_SUBMIT = "task_submit"
    TASK_CREATE = "task_create"
    TASK_UPDATE = "task_update"
    TASK_REORDER = "task_reorder"
    TASK_DELETE = "task_delete"
    USAGE_LOG = "usage_log"
    USAGE_READ = "usage_read"


# Actions each role may perform on the clients it belongs to.
# ADMIN and PM are not listed: they may perform every action on every client.
MEMBER_PERMISSIONS: dict[PrincipalRole, set[AccessAction]] = {
    PrincipalRole.CLIENT: {
        AccessAction.TASK_READ,
        AccessAction.TASK_SUBMIT,
        AccessAction.USAGE_READ,
    },
    PrincipalRole.DEV: {
        AccessAction.TASK_READ,
        AccessAction.TASK_UPDATE,
        AccessAction.USAGE_LOG,
        AccessAction.USAGE_READ,
    },
}
