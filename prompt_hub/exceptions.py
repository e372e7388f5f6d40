"""Exceptions raised by prompt-hub."""


class HubError(Exception):
    """Base exception for prompt hub errors."""
    pass


class UnsupportedModelClassError(HubError, ValueError):
    """The model class passed to pull has no known import-map key."""
    pass


class PromptLoadError(HubError):
    """A pulled manifest could not be deserialized."""
    pass


class PromptFileError(HubError, ValueError):
    """A local prompt file could not be read or is invalid."""
    pass
