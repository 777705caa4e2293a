"""Collaborator contracts and their implementations.

Business logic in :mod:`davsdk.services` talks only to the abstract
interfaces in :mod:`davsdk.core.interfaces`; concrete transports are injected
by the caller.
"""
