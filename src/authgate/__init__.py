"""AuthGate - minimal authentication gateway.

Wires authgate_identity (users) and authgate_auth (sessions, cookies,
providers) into a FastAPI application.
"""
