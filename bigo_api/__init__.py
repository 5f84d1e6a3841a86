"""BigO API: user identity sync and admin user management."""

__version__ = "1.0.0"
