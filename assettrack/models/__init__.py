"""
ORM model package. Import all models here so Alembic autogenerate
can discover every table through the shared Base metadata.
"""
from assettrack.models.owner import Owner  # noqa: F401
from assettrack.models.property import Property  # noqa: F401
from assettrack.models.activity_log import ActivityLog  # noqa: F401
