"""Git helpers used by recipe discovery."""

from .remote import DEFAULT_REMOTE, GitRemote, RemoteRegistrationError

__all__ = ["DEFAULT_REMOTE", "GitRemote", "RemoteRegistrationError"]
