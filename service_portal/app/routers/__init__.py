"""
HTTP routers for the Portal service.

Each module exposes ``build_router(...)`` taking the clients and services it
forwards to, so the service wires one shared instance of each into every
router.
"""
