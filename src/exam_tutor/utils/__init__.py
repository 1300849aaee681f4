"""
Utility helpers for environment and logging setup.
"""

from src.exam_tutor.utils.env_loader import load_env
from src.exam_tutor.utils.logging_config import setup_logging

__all__ = [
    "load_env",
    "setup_logging",
]
