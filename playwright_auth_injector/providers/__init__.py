"""
Identity Providers
==================
Pluggable sign-in strategies.

Architecture:
    - ``BaseAuthProvider``  — abstract base for all providers
    - ``ProviderRegistry``  — static name → provider lookup

Built-in providers:
    - ``FirebaseAuthProvider`` — custom token → IndexedDB session
    - ``SupabaseAuthProvider`` — config validation only (sign-in pending)
"""

from .base import BaseAuthProvider
from .registry import ProviderRegistry, get_provider
from .firebase import FirebaseAuthProvider, reset_admin_state
from .supabase import SupabaseAuthProvider

__all__ = [
    "BaseAuthProvider",
    "ProviderRegistry",
    "get_provider",
    "FirebaseAuthProvider",
    "SupabaseAuthProvider",
    "reset_admin_state",
]
