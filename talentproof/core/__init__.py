"""
Core module for application configuration and quiz assessment logic.

Note: the assessment modules are not imported at package level so that
importing settings stays cheap. Import them directly:
from talentproof.core.evaluator import ... or from talentproof.core.session_store import ...
"""
from .config import settings

__all__ = ["settings"]
