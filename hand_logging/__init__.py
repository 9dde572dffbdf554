"""Structured per-hand event logging."""

from .self_play_logger import SelfPlayLogger, create_logger

__all__ = ["SelfPlayLogger", "create_logger"]
