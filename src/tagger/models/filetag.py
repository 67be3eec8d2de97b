from sqlalchemy import Column, Integer, ForeignKey
from tagger.models import Base


class FileTag(Base):
    """Association row: one tag applied to one file, nothing else."""
    __tablename__ = "file_tags"

    file_id = Column(Integer, ForeignKey("files.id"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id"), primary_key=True)
