"""
Structured logging for the Product Page Extractor.

Every request gets a short trace id so the lines one extraction emits
(identifier gate, fetch, each strategy, normalizer) can be grouped.
"""
import uuid
import logging
import structlog
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

from app.config import config

DEFAULT_LOG_LEVEL = logging.INFO

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def get_trace_id() -> str:
    """Return the request's trace id, minting one outside a request."""
    trace_id = trace_id_var.get()
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        trace_id_var.set(trace_id)
    return trace_id


def set_trace_id(trace_id: Optional[str] = None) -> str:
    new_trace_id = trace_id or str(uuid.uuid4())[:8]
    trace_id_var.set(new_trace_id)
    return new_trace_id


def add_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict["trace_id"] = get_trace_id()
    return event_dict


def resolve_log_level(name: Optional[str]) -> int:
    """Map a LOG_LEVEL name to its numeric level; unknown names fall back to INFO."""
    level = logging.getLevelName((name or "").strip().upper())
    if isinstance(level, int):
        return level
    return DEFAULT_LOG_LEVEL


def build_processors(log_format: str) -> List[Any]:
    """Processor chain ending in a JSON renderer for LOG_FORMAT=json, console otherwise."""
    processors = [
        structlog.contextvars.merge_contextvars,
        add_trace_id,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None):
    """Configure structlog from the arguments, or from config when omitted."""
    structlog.configure(
        processors=build_processors(log_format or config.LOG_FORMAT),
        wrapper_class=structlog.make_filtering_bound_logger(
            resolve_log_level(log_level or config.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


class LayerLogger:
    """
    Diagnostics sink for one cascade component.

    Strategies never print; they report through one of these, keyed by
    component name, so tests can capture the cascade's path with
    ``structlog.testing.capture_logs``.
    """

    def __init__(self, layer_name: str):
        self.layer_name = layer_name
        self.logger = get_logger(layer_name)

    def log_decision(self, decision: str, reason: str, url: Optional[str] = None, **extra):
        """Record which selector, pattern or state path won."""
        self.logger.info(
            "decision_made",
            layer=self.layer_name,
            decision=decision,
            reason=reason,
            url=url,
            **extra
        )

    def log_action(self, action: str, status: str = "started", **extra):
        self.logger.info(
            f"action_{status}",
            layer=self.layer_name,
            action=action,
            **extra
        )

    def log_fallback(self, from_source: str, to_source: str, reason: str, **extra):
        """Record the cascade moving past a strategy that came up empty."""
        self.logger.warning(
            "fallback_triggered",
            layer=self.layer_name,
            from_source=from_source,
            to_source=to_source,
            reason=reason,
            **extra
        )

    def log_error(self, error: str, error_type: str = "unknown", **extra):
        """Record a failure that is about to propagate (fetch errors)."""
        self.logger.error(
            "error_occurred",
            layer=self.layer_name,
            error=error,
            error_type=error_type,
            **extra
        )

    def log_parse_failure(self, source: str, error: str, **extra):
        """Record malformed markup or JSON that a strategy recovered from."""
        self.logger.debug(
            "parse_failed",
            layer=self.layer_name,
            source=source,
            error=error,
            **extra
        )

    def log_extraction(
        self,
        source: str,
        fields_present: List[str],
        fields_missing: List[str],
        **extra
    ):
        """Record which product fields a strategy filled and which it left empty."""
        self.logger.info(
            "product_extracted",
            layer=self.layer_name,
            source=source,
            fields_present=fields_present,
            fields_missing=fields_missing,
            **extra
        )


configure_logging()
