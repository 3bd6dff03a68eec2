"""
ORM models. Importing this package registers every table on `Base.metadata`
(used by `Database.create_all` and Alembic's autogenerate).
"""

from lampy.models.user import User
from lampy.models.counsellor import Counsellor
from lampy.models.session import CounsellingSession
from lampy.models.verification import VerificationRequest

__all__ = ["User", "Counsellor", "CounsellingSession", "VerificationRequest"]
