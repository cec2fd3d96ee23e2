"""
Atelier Core
============

Core utilities and shared functionality for Atelier modules.
"""

from .config import Config, get_config_value
from .database import Database
from .logging_service import LoggingService, logger
from .storage import ImageUploadClient, UploadError

__all__ = ['Config', 'get_config_value', 'Database', 'LoggingService', 'logger',
           'ImageUploadClient', 'UploadError']
