from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from permitpro.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False)
    file_name = Column(Text, nullable=False)
    file_path = Column(Text, nullable=False)
    version = Column(Text, nullable=False, default="1.0")
    uploader_name = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    package = relationship("Package", back_populates="documents")
