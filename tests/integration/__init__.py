"""Persistence integration tests.

These tests run the real crud layer, repositories and migrations against the
Postgres server the POSTGRES_* settings point at. Every test starts from a
freshly created schema in that database, so point them at a throwaway one.
"""
