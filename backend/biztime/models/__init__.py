# Models package init
"""
BizTime Backend — ORM Models
=============================

Importing this package registers every table on `Base.metadata`
(used by create_tables() and by Alembic autogenerate).
"""

from biztime.models.company import Company
from biztime.models.invoice import Invoice

__all__ = ["Company", "Invoice"]
