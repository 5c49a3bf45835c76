"""
Core utilities shared across the task management API.

This package hosts configuration (env vars, defaults), the error taxonomy
and its envelope mapping, and logging setup. Routers, stores and services
depend on these primitives instead of reading the environment or building
error payloads themselves.
"""
