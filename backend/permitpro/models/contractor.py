from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship
from permitpro.database import Base


class Contractor(Base):
    __tablename__ = "contractors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(Text, nullable=False)
    license_number = Column(Text, nullable=False, unique=True)
    address = Column(Text, nullable=False)
    phone_number = Column(Text, nullable=False)
    email = Column(Text)
    contact_person = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    # Never let the ORM null out package references on delete; the
    # reassignment rule in PackageService owns that decision.
    packages = relationship("Package", back_populates="contractor", passive_deletes="all")
