"""Core engine primitives (effects, timers, and the engine driver).

Kept free of FastAPI concerns so it can be reused by API routes, the arcade shell, and tests.
"""
