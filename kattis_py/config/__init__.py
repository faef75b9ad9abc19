"""Configuration management."""

from .credentials import Credentials
from .languages import normalize_language
from .solution_config import SolutionConfig

__all__ = ["Credentials", "SolutionConfig", "normalize_language"]
