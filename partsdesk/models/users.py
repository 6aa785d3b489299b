# partsdesk/models/users.py
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from partsdesk.database import Base, enum_column

# Roles known to the distribution portal
class UserRole(str, enum.Enum):
    CLIENT = "client"
    REPRESENTATIVE = "representative"
    ACCOUNTING = "accounting"
    COUNTER_IBN_TACHFINE = "counter_ibn_tachfine"
    WAREHOUSE_LA_VILLETTE = "warehouse_la_villette"
    DIRECTOR_ADMIN = "director_admin"

# Represents a user account; transfers and orders reference users as actors
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(enum_column(UserRole, "user_role"), nullable=False)
    sage_id = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
