"""
Logging configuration for the polyvolume package.

This module provides centralized logging configuration with support for:
- Console output and optional timestamped log files
- Structured key=value context appended to messages
- Timing of volume computations

The numerical functions only log at DEBUG level, so the default console
handler stays quiet unless the level is lowered.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime
import traceback
import functools
import time

from polyvolume.errors import PolyVolumeError


class VolumeLogger:
    """
    Centralized logger for volume computations.
    
    Provides structured logging with context information and performance tracking.
    """
    
    def __init__(self, name: str = "polyvolume", log_dir: Optional[str] = None):
        """
        Initialize the logger.
        
        Args:
            name: Logger name (typically module name)
            log_dir: Directory for log files. If None, logs only to console.
        """
        self.logger = logging.getLogger(name)
        self.log_file: Optional[Path] = None
        self.setup_handlers(log_dir)

    def setup_handlers(self, log_dir: Optional[str] = None) -> None:
        """
        (Re)create the console handler and, if requested, a file handler.

        Args:
            log_dir: Directory for log files. If None, logs only to console.
        """
        self.logger.setLevel(logging.DEBUG)

        # Remove existing handlers to avoid duplicates
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        self.log_file = None
        
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)
        
        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = log_path / f"polyvolume_{timestamp}.log"
            
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)
            self.log_file = log_file

            self.logger.debug(f"Logging initialized. Log file: {log_file}")
    
    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with optional context."""
        self._log_with_context(logging.DEBUG, message, kwargs)
    
    def info(self, message: str, **kwargs) -> None:
        """Log info message with optional context."""
        self._log_with_context(logging.INFO, message, kwargs)
    
    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with optional context."""
        self._log_with_context(logging.WARNING, message, kwargs)
    
    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with optional exception info and context."""
        self._log_with_context(logging.ERROR, message, kwargs, exc_info=exc_info)
    
    def set_level(self, level: int) -> None:
        """Set the level of the logger and its console handler."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
    
    def _log_with_context(self, level: int, message: str, context: Dict[str, Any], 
                         exc_info: bool = False) -> None:
        """Log message with structured context information."""
        if context:
            context_str = " | ".join(f"{k}={v}" for k, v in context.items())
            full_message = f"{message} | {context_str}"
        else:
            full_message = message
        
        self.logger.log(level, full_message, exc_info=exc_info)
    
    def log_exception(self, exception: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an exception with its traceback and context.
        
        Args:
            exception: The exception to log
            context: Optional context information
        """
        exc_type = type(exception).__name__
        exc_traceback = ''.join(traceback.format_tb(exception.__traceback__))
        
        error_msg = f"{exc_type}: {exception}\nTraceback:\n{exc_traceback}"
        self.error(error_msg, **(context or {}))


class PerformanceTimer:
    """Context manager for timing code execution."""
    
    def __init__(self, logger: VolumeLogger, operation_name: str):
        self.logger = logger
        self.operation_name = operation_name
        self.start_time = None
        self.end_time = None
    
    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}")
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time
        
        if exc_type is None:
            self.logger.debug(
                f"Completed: {self.operation_name}",
                duration_seconds=f"{duration:.6f}"
            )
        elif isinstance(exc_val, PolyVolumeError):
            # Reported to the caller through the exception itself
            self.logger.debug(
                f"Failed: {self.operation_name}",
                duration_seconds=f"{duration:.6f}",
                error=str(exc_val)
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                duration_seconds=f"{duration:.6f}",
                error=str(exc_val)
            )
        
        return False  # Don't suppress exceptions
    
    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.start_time is None:
            return 0.0
        if self.end_time is None:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time


def log_function_call(logger: VolumeLogger):
    """
    Decorator to log function calls and their execution time at DEBUG level.
    
    Args:
        logger: VolumeLogger instance
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            func_name = func.__name__
            logger.debug(f"Calling {func_name}", args_count=len(args), kwargs_count=len(kwargs))
            
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                logger.debug(
                    f"Error in {func_name}: {e}",
                    duration_seconds=f"{duration:.6f}"
                )
                raise
            duration = time.perf_counter() - start_time
            logger.debug(f"Completed {func_name}", duration_seconds=f"{duration:.6f}")
            return result
        
        return wrapper
    return decorator


# Global logger instance
_global_logger: Optional[VolumeLogger] = None


def get_logger(name: str = "polyvolume", log_dir: Optional[str] = None) -> VolumeLogger:
    """
    Get or create the global logger instance.
    
    Args:
        name: Logger name, only used when the logger is first created
        log_dir: Directory for log files
        
    Returns:
        VolumeLogger instance
    """
    global _global_logger
    
    if _global_logger is None:
        _global_logger = VolumeLogger("polyvolume", log_dir)
    
    return _global_logger


def configure_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> VolumeLogger:
    """
    Configure global logging settings.
    
    The existing logger instance is reconfigured in place so that module-level
    references obtained through get_logger() see the new handlers.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
    """
    global _global_logger
    
    level = getattr(logging, log_level.upper(), logging.INFO)
    
    if _global_logger is None:
        _global_logger = VolumeLogger("polyvolume", log_dir)
    else:
        _global_logger.setup_handlers(log_dir)

    _global_logger.set_level(level)
    return _global_logger
