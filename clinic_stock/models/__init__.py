"""Import all models so SQLModel.metadata picks them up."""

from clinic_stock.models.category import Category, CategoryCreate, CategoryRead
from clinic_stock.models.clinic import (
    Clinic,
    ClinicCreate,
    ClinicMember,
    ClinicMemberRead,
    ClinicRead,
    MemberRole,
)
from clinic_stock.models.invitation import ClinicInvitation, InvitationAccepted, InvitationRead
from clinic_stock.models.item import Item, ItemCreate, ItemRead, ItemUpdate
from clinic_stock.models.transaction import (
    InventoryTransaction,
    TransactionCreate,
    TransactionRead,
    TransactionType,
)
from clinic_stock.models.user import Profile, User, UserCreate, UserRead

__all__ = [
    "Category",
    "CategoryCreate",
    "CategoryRead",
    "Clinic",
    "ClinicCreate",
    "ClinicInvitation",
    "ClinicMember",
    "ClinicMemberRead",
    "ClinicRead",
    "InventoryTransaction",
    "InvitationAccepted",
    "InvitationRead",
    "Item",
    "ItemCreate",
    "ItemRead",
    "ItemUpdate",
    "MemberRole",
    "Profile",
    "TransactionCreate",
    "TransactionRead",
    "TransactionType",
    "User",
    "UserCreate",
    "UserRead",
]
