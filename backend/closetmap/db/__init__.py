"""Database Layer — declarative base and column types shared by all models.

Invariants:
    - All sessions are async (AsyncSession); the engine lives in infrastructure/database.py
"""
