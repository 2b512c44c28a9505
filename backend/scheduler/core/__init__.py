# Core package: configuration, logging, errors, validation and security
# shared by every layer of the scheduler.

from . import config, exceptions, security, validation

__all__ = [
    "config",
    "exceptions",
    "security",
    "validation",
]
