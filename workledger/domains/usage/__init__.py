"""Usage domain: hours ledger, cycle aggregates and risk classification.

Use Inject(UsageServiceProtocol) in FastAPI endpoints for principal-scoped
reads and manual time logging. Use Inject(UsageLedgerProtocol) where hours
are appended on behalf of the system, e.g. on task completion.
"""
