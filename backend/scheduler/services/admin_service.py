from scheduler.domain.entities import Admin
from scheduler.services.user_service import UserService


class AdminService(UserService):
    """Admin users: the shared user rules, no relations."""

    resource = "admin"
    api_resource = "admins"
    entity_class = Admin
