"""User storage adapters.

Services talk to ``AbstractUserRepository``; the in-memory document store is
the default backend and can be swapped for a real document database.
"""
