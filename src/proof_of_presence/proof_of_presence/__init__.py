"""Proof of Presence package.

Feature modules (users, students, sessions, attendance, vision, ledger) each keep
a plain model, a repository interface with a MySQL implementation, a service with
the business rules and a thin Flask controller.
"""
