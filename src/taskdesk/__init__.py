"""taskdesk: terminal dashboard for a remote task-management API.

Log in, then list, create, edit and delete tasks. The session token is
persisted between invocations.
"""

__version__ = "0.1.0"
