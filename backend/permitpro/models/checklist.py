from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from permitpro.database import Base


class ChecklistTemplate(Base):
    __tablename__ = "checklist_templates"
    __table_args__ = (UniqueConstraint("county", "permit_type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    county = Column(Text, nullable=False)
    permit_type = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    items = relationship(
        "ChecklistItem",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="ChecklistItem.order",
    )


class ChecklistItem(Base):
    __tablename__ = "checklist_items"
    __table_args__ = (UniqueConstraint("template_id", "name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(Integer, ForeignKey("checklist_templates.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    is_required = Column(Boolean, nullable=False, default=True)
    is_custom = Column(Boolean, nullable=False, default=False)
    order = Column("sort_order", Integer, nullable=False)

    template = relationship("ChecklistTemplate", back_populates="items")


class PackageChecklist(Base):
    __tablename__ = "package_checklists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False, unique=True)
    template_id = Column(Integer, ForeignKey("checklist_templates.id", ondelete="SET NULL"))
    created_at = Column(Text, nullable=False)

    package = relationship("Package", back_populates="checklist")
    template = relationship("ChecklistTemplate")
    items = relationship(
        "PackageChecklistItem",
        back_populates="checklist",
        cascade="all, delete-orphan",
        order_by="PackageChecklistItem.order",
    )


class PackageChecklistItem(Base):
    __tablename__ = "package_checklist_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    checklist_id = Column(Integer, ForeignKey("package_checklists.id", ondelete="CASCADE"), nullable=False)
    template_item_id = Column(Integer, ForeignKey("checklist_items.id", ondelete="SET NULL"))
    # Snapshot of the template item at instantiation time
    name = Column(Text, nullable=False)
    is_required = Column(Boolean, nullable=False, default=True)
    order = Column("sort_order", Integer, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(Text)
    completed_by = Column(Text)
    notes = Column(Text)

    checklist = relationship("PackageChecklist", back_populates="items")
