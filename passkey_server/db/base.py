# (c) Copyright Datacraft, 2026
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
