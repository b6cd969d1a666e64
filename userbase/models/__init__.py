"""
Model package.

IMPORTANT (Alembic / SQLModel):
- Alembic autogenerate relies on `SQLModel.metadata`, which is populated only
  when the table models are imported.
- `alembic/env.py` imports `userbase.models`, so this module must import all
  SQLModel `table=True` models to register them.
"""

# Import table models so SQLModel registers them in metadata.
from userbase.role.models import Role  # noqa: F401
from userbase.user.models import User, UserRoleLink  # noqa: F401
