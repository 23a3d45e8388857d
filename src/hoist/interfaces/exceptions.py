"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class ScmProviderError(InterfaceError):
    """Exception for source control provider operations."""
