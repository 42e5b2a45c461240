import enum


class RoleName(str, enum.Enum):
    OWNER  = "OWNER"
    SHOP   = "SHOP"
    VENDOR = "VENDOR"
    ADMIN  = "ADMIN"


# Roles that may be chosen at self-registration
SELF_SERVICE_ROLES = (RoleName.OWNER, RoleName.SHOP, RoleName.VENDOR)
