"""
Letter Writer Backend — ORM Models
====================================

Importing this package registers every table with Base.metadata
(used by Alembic autogenerate and by the test suite's create_all()).
"""

from app.models.letter import Letter
from app.models.user import User

__all__ = ["Letter", "User"]
