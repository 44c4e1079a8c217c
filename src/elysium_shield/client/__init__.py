"""Async client for the Elysium Shield API."""

from __future__ import annotations

from elysium_shield.client.client import ShieldClient

__all__ = ["ShieldClient"]
