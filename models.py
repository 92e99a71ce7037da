from sqlalchemy import Column, Integer, Text
from db import Base

class ShortURL(Base):
    __tablename__ = "urls"

    # short_code is not unique: the generator can repeat a value
    id = Column(Integer, primary_key=True, autoincrement=True)
    original_url = Column(Text, nullable=False)
    short_code = Column(Integer, nullable=False, index=True)
