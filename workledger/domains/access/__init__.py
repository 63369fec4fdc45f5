"""Access domain: decides whether a principal may act on a client.

Use Inject(AccessPolicyProtocol) wherever an operation is scoped to a client.
"""
