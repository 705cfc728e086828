"""Core app configuration, database, security and request validation.

Only settings are re-exported here; import the database, security and
validation modules directly so importing one does not drag in the others.
"""

from inventory.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
