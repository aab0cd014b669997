"""ClosetMap Application Package — bag and clothing inventory API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
