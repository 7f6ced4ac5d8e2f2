from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from permitpro.database import Base

PERMIT_TYPES = ("Mobile Home Permit", "Modular Home Permit", "Shed Permit")
PACKAGE_STATUSES = ("Draft", "Submitted", "Completed")


class Package(Base):
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(Text, nullable=False)
    property_address = Column(Text, nullable=False)
    county = Column(Text, nullable=False)
    permit_type = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="Draft")
    contractor_id = Column(Integer, ForeignKey("contractors.id", ondelete="RESTRICT"))
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    contractor = relationship("Contractor", back_populates="packages")
    documents = relationship(
        "Document",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="Document.id",
    )
    subcontractors = relationship(
        "PackageSubcontractor",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageSubcontractor.created_at",
    )
    checklist = relationship(
        "PackageChecklist",
        back_populates="package",
        uselist=False,
        cascade="all, delete-orphan",
    )
