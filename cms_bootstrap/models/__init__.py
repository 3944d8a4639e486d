from cms_bootstrap.models.admin import AdminRole, AdminUser, admin_users_roles
from cms_bootstrap.models.base import Base
from cms_bootstrap.models.content import CONTENT_TYPES, Article, Category, Global, Writer
from cms_bootstrap.models.core_store import CoreStore
from cms_bootstrap.models.upload_file import UploadFile
from cms_bootstrap.models.users_permissions import UpPermission, UpRole

__all__ = [
    "Base",
    "CoreStore",
    "UploadFile",
    "Category",
    "Writer",
    "Article",
    "Global",
    "CONTENT_TYPES",
    "UpRole",
    "UpPermission",
    "AdminRole",
    "AdminUser",
    "admin_users_roles",
]
