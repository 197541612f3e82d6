"""
Core infrastructure shared by the agent runtime, the LLM layer and the server:
logging configuration, event emission and the persistent chat record store.
"""

from deskmate_ai.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
