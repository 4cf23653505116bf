from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.leave_request import LeaveRequest, LeaveStatus  # noqa: F401
from app.models.period import Period  # noqa: F401
from app.models.school_class import SchoolClass  # noqa: F401
from app.models.subject import Subject  # noqa: F401
from app.models.substitution import Substitution, SubstitutionStatus  # noqa: F401
from app.models.teacher import Teacher, TeacherPost  # noqa: F401
