"""
FastAPI routers grouped by entity (users, tasks).

Each module exposes an APIRouter included by ``taskapi.app``. Handlers pull
their service from ``request.app.state`` and wrap results in the success
envelope; errors propagate to the exception handlers registered on the app.
"""
