"""Game domain services: rooms, rejoin, phases, scoring and liveness.

This package contains pure(ish) domain logic that the Socket.IO adapter and
HTTP routes import, keeping transport concerns separated from core game
mechanics.
"""
