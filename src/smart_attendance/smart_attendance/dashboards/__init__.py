from .admin import AdminDashboard
from .student import StudentDashboard
from .teacher import TeacherDashboard

__all__ = ["AdminDashboard", "StudentDashboard", "TeacherDashboard"]
