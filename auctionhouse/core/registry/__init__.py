"""
Identity Registry Module.

Tracks registered parties and their bidding profile.
"""

from auctionhouse.core.registry.identity_registry import (
    IdentityRegistry,
    UserProfile,
)

__all__ = [
    "IdentityRegistry",
    "UserProfile",
]
