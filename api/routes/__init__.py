"""
API routes package for Data Dictionary Revisions.
"""
from api.routes import projects, comparison, system

__all__ = ["projects", "comparison", "system"]
