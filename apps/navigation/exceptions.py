"""Exception hierarchy for the navigation subsystem."""


class NavigationError(Exception):
    """Base exception for navigation errors."""


class RowStoreError(NavigationError):
    """The row store could not be read or written."""


class DuplicateRowError(RowStoreError):
    """A row violates a uniqueness constraint (slug/locale or group/locale)."""


class SlugAllocationError(NavigationError):
    """No free slug could be allocated for a synthesized locale row."""


class AuthoringError(NavigationError):
    """Invalid authoring request (bad payload, unknown row)."""


class PageNotFoundError(AuthoringError):
    """The targeted page row does not exist."""
