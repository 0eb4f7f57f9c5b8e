"""Public interface definitions for all external collaborators.

Every external service (Google Sheets, Gmail) and every swappable store is
accessed through the abstract base classes defined in this package.
Concrete adapters live in ``src/providers/`` and are chosen in
``src/main.py`` at startup, so unit tests can inject fakes and a
production deployment can swap a backend by changing one constructor.

CONCRETE PROVIDER MAP:
    Interface              →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICodeStore             →  MemoryCodeStore
    IAccountDirectory      →  GoogleSheetsAccountDirectory,
                              InMemoryAccountDirectory
    INotificationSender    →  GmailNotificationSender
"""

from src.interfaces.account_directory import IAccountDirectory
from src.interfaces.code_store import ICodeStore
from src.interfaces.notification_sender import INotificationSender

__all__ = [
    "IAccountDirectory",
    "ICodeStore",
    "INotificationSender",
]
