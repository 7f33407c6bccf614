from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Case(Base):
    __tablename__ = 'cases'

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
