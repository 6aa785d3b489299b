# partsdesk/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from partsdesk.database import Base

# Audit trail of mutating operations (who did what, on which resource)
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data (ids, quantities, old/new status)
    meta = Column(JSON, nullable=True)
