"""Clients domain: data access for billed tenants."""
