"""Exception types raised by the RBAC client."""


class RBACClientError(Exception):
    """Base RBAC client exception."""


class ReadOnlyManagerError(RBACClientError, NotImplementedError):
    """Raised for mutations against a manager that only materializes snapshots."""
