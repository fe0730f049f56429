"""
Logging utility for the Rooming List reconciliation system.
"""
import logging
import sys
from typing import Optional
from colorama import Fore, Style, init
import structlog

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorizedFormatter(logging.Formatter):
    """Custom formatter with colorized output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"

        return super().format(record)


def setup_logger(
    name: str = "rooming_list",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(name)

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.setLevel(getattr(logging, level.upper()))

    # Repeated setup (CLI re-runs, tests) must not stack handlers
    if stdlib_logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_formatter = ColorizedFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    stdlib_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        stdlib_logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "rooming_list") -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


class RosterLogger:
    """Specialized logger for roster loads with summary tracking."""

    def __init__(self, logger: structlog.BoundLogger):
        self.logger = logger
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict:
        return {
            'snapshots_received': 0,
            'malformed_items': 0,
            'cancelled_codes': 0,
            'superseded_snapshots': 0,
            'records_kept': 0,
            'errors': 0,
        }

    def log_extraction(self, provider: str, snapshot_count: int):
        """Log a successful extraction call."""
        self.stats['snapshots_received'] += snapshot_count
        self.logger.info("Snapshots extracted", provider=provider, snapshots=snapshot_count)

    def log_malformed_item(self, index: int, missing_fields: list):
        """Log an item that needed field defaulting."""
        self.stats['malformed_items'] += 1
        self.logger.warning("Snapshot item defaulted", index=index, missing_fields=missing_fields)

    def log_reconciliation(self, report):
        """Log the outcome of a reconciliation pass."""
        self.stats['cancelled_codes'] += len(report.cancelled_codes)
        self.stats['superseded_snapshots'] += report.superseded_snapshots
        self.stats['records_kept'] += report.records_kept
        self.logger.info(
            "Roster reconciled",
            snapshots=report.snapshots_received,
            cancelled_codes=len(report.cancelled_codes),
            superseded=report.superseded_snapshots,
            kept=report.records_kept
        )

    def log_error(self, error: Exception, context: str = ""):
        """Log an error."""
        self.stats['errors'] += 1
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context
        )

    def print_summary(self):
        """Print a summary of the current load."""
        self.logger.info("Load summary", **self.stats)

        print(f"\n{Fore.CYAN}{'='*50}")
        print(f"{Fore.WHITE}ROSTER LOAD SUMMARY")
        print(f"{Fore.CYAN}{'='*50}")
        print(f"{Fore.GREEN}✓ Snapshots received: {self.stats['snapshots_received']}")
        print(f"{Fore.YELLOW}⚠ Items defaulted: {self.stats['malformed_items']}")
        print(f"{Fore.YELLOW}⚠ Cancelled reservations: {self.stats['cancelled_codes']}")
        print(f"{Fore.BLUE}✓ Superseded snapshots: {self.stats['superseded_snapshots']}")
        print(f"{Fore.GREEN}✓ Reconciled records: {self.stats['records_kept']}")
        print(f"{Fore.RED}✗ Errors: {self.stats['errors']}")
        print(f"{Fore.CYAN}{'='*50}\n")

    def reset_stats(self):
        """Reset statistics."""
        self.stats = self._empty_stats()
