from sqlalchemy import Column, Integer, Text
from tagger.models import Base


class Tag(Base):
    __tablename__ = "tags"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Tag id={self.id} name={self.name!r}>"
