from nameplate_dashboard.models.user import User
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate
from nameplate_dashboard.models.verified_nameplate import VerifiedNameplate
from nameplate_dashboard.models.notification import Notification

__all__ = ["User", "UnverifiedNameplate", "VerifiedNameplate", "Notification"]
