from planmap.db.models import Base
from planmap.db.database import engine, get_db
from planmap.db.init_db import init_database
