"""Madrasah helpdesk backend package."""

__all__ = []
