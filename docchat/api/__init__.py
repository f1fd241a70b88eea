"""
API routes module.

FastAPI app factory, dependency container and HTTP routers.
"""
