"""Roster domain services: bar arithmetic, mutations, history, storage and
the synchronization gate.

Socket handlers and HTTP routes import from here, keeping transport concerns
separated from the roster rules.
"""
