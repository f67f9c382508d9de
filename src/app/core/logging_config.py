import logging
import sys

from .config import LOG_LEVEL, REPORTS_LOG_LEVEL


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(log_formatter)

# --- Namespace-based Filter (Optional) ---
# To only see logs from the upstream client and the credentials feature:
#
# namespace_filter = NamespaceFilter(["app.features.reports.client", "app.features.credentials"])
# console_handler.addFilter(namespace_filter)


def level_from_name(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str = LOG_LEVEL, reports_level: str = REPORTS_LOG_LEVEL) -> logging.Logger:
    """Sets up the "app" logger. Safe to call more than once."""
    app_logger = logging.getLogger("app")
    app_logger.setLevel(level_from_name(level))
    if console_handler not in app_logger.handlers:
        app_logger.addHandler(console_handler)

    # Upstream calls are the interesting part when debugging a failed report
    logging.getLogger("app.features.reports").setLevel(level_from_name(reports_level, app_logger.level))

    # httpx logs every request at INFO; keep it quiet unless asked
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return app_logger


app_logger = configure_logging()
