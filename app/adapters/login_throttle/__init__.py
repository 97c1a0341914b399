"""Login throttling adapters.

The authentication service depends on the abstract guard so the in-memory
table can later be replaced by a shared store without touching the routes.
"""
