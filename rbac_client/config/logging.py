"""
Logging configuration for the RBAC client.

This module provides centralized logging configuration with support for
structured logging, different log levels, and multiple output formats.
"""

import logging
import logging.config
import sys
from typing import Any, Dict, Optional


def get_logging_config(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Get logging configuration dictionary.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path
        
    Returns:
        Logging configuration dictionary
    """
    
    # Check if python-json-logger is available
    try:
        import pythonjsonlogger.jsonlogger  # noqa: F401
        json_formatter_available = True
    except ImportError:
        json_formatter_available = False
    
    formatters = {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        }
    }
    
    if json_formatter_available:
        formatters["json"] = {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(module)s %(lineno)d %(message)s"
        }
    else:
        # Fallback to detailed format if JSON formatter is not available
        formatters["json"] = formatters["detailed"]
    
    formatter_name = "json" if log_format == "json" else "detailed"
    
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": formatter_name,
            "stream": sys.stdout
        }
    }
    
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": formatter_name,
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8"
        }
    
    loggers = {
        "rbac_client": {
            "level": log_level,
            "handlers": list(handlers.keys()),
            "propagate": False
        },
        "httpx": {
            "level": "WARNING",
            "handlers": list(handlers.keys()),
            "propagate": False
        }
    }
    
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers
    }


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None
) -> None:
    """
    Setup logging configuration.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path
    """
    config = get_logging_config(
        log_level=log_level.upper(),
        log_format=log_format,
        log_file=log_file
    )
    
    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Structured logger for consistent log message formatting.
    
    This class provides methods for logging snapshot loads with
    consistent field names and formats.
    """
    
    def __init__(self, name: str):
        """Initialize structured logger.
        
        Args:
            name: Logger name
        """
        self.logger = get_logger(name)
    
    def log_snapshot_fetch(
        self,
        url: str,
        status_code: Optional[int],
        response_time: float,
        success: bool,
        error: Optional[str] = None,
        **kwargs
    ):
        """Log a snapshot request to the policy authority.
        
        Args:
            url: Snapshot URL
            status_code: Response status code, None when no response arrived
            response_time: Response time in milliseconds
            success: Whether a snapshot (or not-found) was obtained
            error: Error message if the request failed
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "snapshot_fetch",
            "url": url,
            "status_code": status_code,
            "response_time_ms": response_time,
            "success": success,
        }
        
        if error:
            log_data["error"] = error
        
        log_data.update(kwargs)
        
        if not success:
            self.logger.error("Snapshot fetch failed", extra=log_data)
        elif status_code == 404:
            self.logger.warning("Snapshot not found", extra=log_data)
        else:
            self.logger.info("Snapshot fetched", extra=log_data)
    
    def log_materialization(
        self,
        items: int,
        parents: int,
        rules: int,
        assignments: int,
        **kwargs
    ):
        """Log the size of a materialized snapshot.
        
        Args:
            items: Number of items
            parents: Number of child items with at least one parent
            rules: Number of rules
            assignments: Number of users with assignments
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "snapshot_materialized",
            "items": items,
            "parents": parents,
            "rules": rules,
            "assignments": assignments,
        }
        log_data.update(kwargs)
        self.logger.info("Snapshot materialized", extra=log_data)
    
    def debug(self, message: str, **kwargs):
        """Log debug message with structured data."""
        self.logger.debug(message, extra=kwargs)

