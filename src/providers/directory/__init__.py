"""Instructor account directories.

GoogleSheetsAccountDirectory is the production system of record;
InMemoryAccountDirectory backs local development and integration tests.
"""

from src.providers.directory.google_sheets_directory import GoogleSheetsAccountDirectory
from src.providers.directory.memory_directory import InMemoryAccountDirectory

__all__ = ["GoogleSheetsAccountDirectory", "InMemoryAccountDirectory"]
