"""Verification-code stores.

MemoryCodeStore keeps codes in process memory with per-entry expiry. For
multi-worker deployments, swap in a networked adapter implementing
ICodeStore without changing the recovery workflow.
"""

from src.providers.code_store.memory_code_store import MemoryCodeStore

__all__ = ["MemoryCodeStore"]
