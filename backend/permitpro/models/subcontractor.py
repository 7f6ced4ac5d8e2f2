from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from permitpro.database import Base


class Subcontractor(Base):
    __tablename__ = "subcontractors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(Text, nullable=False)
    license_number = Column(Text)
    address = Column(Text)
    phone_number = Column(Text)
    email = Column(Text)
    contact_person = Column(Text)
    trade_type = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    assignments = relationship(
        "PackageSubcontractor",
        back_populates="subcontractor",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PackageSubcontractor(Base):
    __tablename__ = "package_subcontractors"

    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), primary_key=True)
    subcontractor_id = Column(Integer, ForeignKey("subcontractors.id", ondelete="CASCADE"), primary_key=True)
    # Package-specific; may differ from Subcontractor.trade_type
    trade_type = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    package = relationship("Package", back_populates="subcontractors")
    subcontractor = relationship("Subcontractor", back_populates="assignments")
