"""Tasks domain: status transitions, ordering and the single-active rule.

Use Inject(TaskServiceProtocol) in FastAPI endpoints.
"""
