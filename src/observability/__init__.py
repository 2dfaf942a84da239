"""Observability module - metrics and structured logging."""

from src.observability.metrics import metrics, MetricsCollector
from src.observability.logging import setup_logging, get_logger, LogContext

__all__ = ["metrics", "MetricsCollector", "setup_logging", "get_logger", "LogContext"]
