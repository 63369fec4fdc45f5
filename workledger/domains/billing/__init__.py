"""Billing domain: subscription sync and billing cycle resets.

Use Inject(SubscriptionSyncProtocol) for the billing events endpoint and
Inject(CycleResetterProtocol) for the scheduled reset.
"""
