from .user import Role, User, group_teachers, load_user
from .group import Group
from .student import Student
from .parent import Parent
from .schedule import Schedule
from .update import Update

__all__ = [
    "Role", "User", "group_teachers", "load_user",
    "Group", "Student", "Parent", "Schedule", "Update",
]
