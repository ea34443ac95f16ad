from __future__ import annotations
import logging
import functools
from typing import Type, Callable, Any

class ArchiverError(Exception): pass
class ConfigError(ArchiverError): pass

class CredentialError(ArchiverError): pass
class CredentialsFileNotFound(CredentialError): pass
class CredentialsParseError(CredentialError): pass
class ProfileNotFound(CredentialError): pass
class IncompleteProfile(CredentialError): pass

class ListError(ArchiverError): pass

class ItemError(ArchiverError):
    """A single-object failure; caught per item, never fatal to a run."""
    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key

class CopyError(ItemError): pass
class DeleteError(ItemError): pass

def setup_logging(level: int = logging.INFO, logfile: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):  # avoid duplicate handlers
        root.removeHandler(h)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    root.addHandler(stream)
    if logfile:
        fh = logging.FileHandler(logfile)
        fh.setFormatter(fmt)
        root.addHandler(fh)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

def log_and_reraise(exception_cls: Type[Exception] = ArchiverError):
    """Wrap any failure of the decorated call into `exception_cls`, keeping the cause."""
    def deco(func: Callable[..., Any]):
        @functools.wraps(func)
        def wrapper(*a, **kw):
            try:
                return func(*a, **kw)
            except exception_cls:
                raise
            except Exception as e:
                logging.getLogger(func.__module__).debug("%s failed: %s", func.__name__, e)
                raise exception_cls(f"{func.__name__} failed: {e}") from e
        return wrapper
    return deco
