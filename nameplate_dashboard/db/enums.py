# nameplate_dashboard/db/enums.py
import enum


# User related enums
class UserRole(enum.Enum):
    admin = "admin"
    rmo = "rmo"
    officer = "officer"


# Notification related enums
class NotificationType(enum.Enum):
    success = "success"
    error = "error"
    info = "info"


# Nameplate lifecycle, derived from the verified flag and the printed copy
class NameplateStage(enum.Enum):
    unverified = "unverified"
    verified = "verified"
    printed = "printed"


# Editor themes -> background templates
class Theme(enum.Enum):
    ambuja = "ambuja"
    acc = "acc"
