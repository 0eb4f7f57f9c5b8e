"""Instructor Hub domain models: re-exports all public model classes.

The models are organized by domain concern:
    - auth.py     : Roles, authenticated users, verified session claims
    - account.py  : Instructor rows from the account directory
    - recovery.py : Verification code entries and recovery workflow states
"""

from __future__ import annotations

from src.models.account import Account
from src.models.auth import AuthUser, SessionClaims, UserRole
from src.models.recovery import RecoveryResult, RecoveryState, VerificationCodeEntry

__all__ = [
    "Account",
    "AuthUser",
    "RecoveryResult",
    "RecoveryState",
    "SessionClaims",
    "UserRole",
    "VerificationCodeEntry",
]
