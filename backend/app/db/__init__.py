"""
Database module for Campus Records

Demo fixtures and the seed script that loads them.
"""
from app.db.seed_data import seed_all, clear_all

__all__ = ["seed_all", "clear_all"]
