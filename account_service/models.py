# account_service/models.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func # For server-side default timestamp
from .database import Base

class User(Base):
    __tablename__ = "users"

    # Assigned by the store (0 for the first account), never autoincremented
    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    name = Column(String, nullable=False)
    lastname = Column(String, nullable=False, default="")
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    date_joined = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
