"""
Logging configuration for the Agentic ML Pine Script Designer.

Provides structured, scannable CLI logging with:
- Color-coded output for Docker/terminal
- Log levels: DEBUG, INFO, WARNING, ERROR
- Component prefixes: [Generator], [API], [Clipboard], etc.
- log() helper that detects the component from the message prefix
"""
import logging
import sys
import os
from datetime import datetime
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Component styles (background + foreground for readability)
    GENERATOR = "\033[48;5;22m\033[97m"       # Dark green bg, white text
    API = "\033[44m\033[97m"                  # Blue bg, white text
    STARTUP = "\033[42m\033[30m"              # Green bg, black text
    SHUTDOWN = "\033[43m\033[30m"             # Yellow bg, black text
    WEBSOCKET = "\033[48;5;17m\033[97m"       # Dark blue bg, white text
    CACHE = "\033[48;5;205m\033[30m"          # Pink bg, black text
    CLIPBOARD = "\033[48;5;93m\033[97m"       # Purple bg, white text
    CLI = "\033[46m\033[30m"                  # Cyan bg, black text

    # Level colors
    WARNING = "\033[43m\033[30m"  # Yellow bg, black text
    ERROR = "\033[41m\033[97m"    # Red bg, white text


class CLIFormatter(logging.Formatter):
    """Custom formatter for scannable CLI output with background colors."""

    COMPONENT_COLORS = {
        'generator': Colors.GENERATOR,
        'api': Colors.API,
        'startup': Colors.STARTUP,
        'shutdown': Colors.SHUTDOWN,
        'websocket': Colors.WEBSOCKET,
        'cache': Colors.CACHE,
        'clipboard': Colors.CLIPBOARD,
        'cli': Colors.CLI,
        'app': '',
    }

    PREFIXES = {
        'generator': ' GEN ',
        'api': ' API ',
        'startup': ' START ',
        'shutdown': ' STOP ',
        'websocket': ' WS ',
        'cache': ' CACHE ',
        'clipboard': ' CLIP ',
        'cli': ' CLI ',
        'app': ' APP ',
    }

    LEVEL_COLORS = {
        'DEBUG': Colors.DIM,
        'INFO': '',
        'WARNING': Colors.WARNING,
        'ERROR': Colors.ERROR,
    }

    def format(self, record):
        # Extract component from logger name
        component = record.name.split('.')[-1] if '.' in record.name else 'app'
        component_color = self.COMPONENT_COLORS.get(component, '')
        prefix = self.PREFIXES.get(component, f' {component.upper()[:5]} ')

        timestamp = datetime.now().strftime("%H:%M:%S")

        level_color = self.LEVEL_COLORS.get(record.levelname, '')
        msg = record.getMessage()

        # For warnings/errors, apply background to whole message
        if record.levelname in ('WARNING', 'ERROR'):
            return f"{Colors.DIM}{timestamp}{Colors.RESET} {component_color}{prefix}{Colors.RESET} {level_color} {msg} {Colors.RESET}"

        return f"{Colors.DIM}{timestamp}{Colors.RESET} {component_color}{prefix}{Colors.RESET} {msg}"


def setup_logging(level: str = None) -> logging.Logger:
    """
    Initialize application logging.

    Args:
        level: Minimum log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
               Defaults to LOG_LEVEL env var or 'DEBUG'

    Returns:
        Root application logger
    """
    if level is None:
        level = os.environ.get('LOG_LEVEL', 'DEBUG')

    log_level = getattr(logging, level.upper(), logging.DEBUG)

    root = logging.getLogger('pinegen')
    root.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    # stderr keeps stdout clean for the CLI, which prints the script there
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(CLIFormatter())
    handler.setLevel(log_level)
    root.addHandler(handler)

    root.propagate = False

    return root


def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return logging.getLogger(f'pinegen.{component}')


# Message prefix -> component
_PREFIX_COMPONENTS = [
    ('[Generator] ', 'generator'),
    ('[API] ', 'api'),
    ('[Startup] ', 'startup'),
    ('[Shutdown] ', 'shutdown'),
    ('[WebSocket] ', 'websocket'),
    ('[WS] ', 'websocket'),
    ('[Cache] ', 'cache'),
    ('[Clipboard] ', 'clipboard'),
    ('[CLI] ', 'cli'),
]


def log(message: str, level: str = 'INFO', component: Optional[str] = None):
    """
    Log a message with automatic component detection from prefix.

    Usage:
        log("[Generator] Script generated")      # Auto-detects component
        log("Cache warmed", component='cache')
        log("[Clipboard] Copy failed", level='WARNING')
    """
    if component is None:
        component = 'app'
        for prefix, name in _PREFIX_COMPONENTS:
            if message.startswith(prefix):
                component = name
                message = message[len(prefix):]
                break

    logger = get_logger(component)
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(log_level, message)


# Uvicorn log config to suppress noisy access logs
UVICORN_LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(levelname)s | %(message)s",
        },
        "access": {
            "format": "%(levelname)s | %(client_addr)s - %(request_line)s %(status_code)s",
        },
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
        "access": {
            "formatter": "access",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "WARNING"},
        "uvicorn.error": {"level": "WARNING"},
        "uvicorn.access": {"handlers": ["access"], "level": "WARNING"},
    },
}


# Initialize logging on import
_root_logger = setup_logging()
