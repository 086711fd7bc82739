# design_poker/app/db/base.py

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# IMPORTANT: import all model modules so they register with Base.metadata
# and their string-based relationships (like "EstimationSession") can be resolved.

from app.db import models  # noqa: F401,E402  (we don't directly use `models`, we just want the side-effects)
