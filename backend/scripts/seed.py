"""
Seed the local database with the admin user, a default contractor and one
sample package per permit type.

Usage (with the package installed, `pip install -e .`):
  python backend/scripts/seed.py

Idempotent: the user and contractor are matched on their unique fields and
sample packages are only created when the default contractor has none.
"""

import logging

from permitpro.database import SessionLocal, init_db
from permitpro.models import Contractor, Package
from permitpro.services.auth_service import login_or_create
from permitpro.services.package_service import PackageService
from permitpro.utils.filesystem import ensure_data_dirs
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.seed")

DEFAULT_LICENSE = "DEFAULT-001"

SAMPLE_PACKAGES = [
    ("John Doe", "123 Main St, Miami, FL", "Miami-Dade", "Mobile Home Permit", "Draft"),
    ("Jane Smith", "456 Oak Ave, Orlando, FL", "Orange", "Modular Home Permit", "Submitted"),
    ("Bob Johnson", "789 Pine St, Tampa, FL", "Hillsborough", "Shed Permit", "Completed"),
]


def ensure_default_contractor(session) -> Contractor:
    contractor = session.query(Contractor).filter(Contractor.license_number == DEFAULT_LICENSE).first()
    if contractor:
        return contractor
    now = utc_timestamp()
    contractor = Contractor(
        company_name="Default Contractor",
        license_number=DEFAULT_LICENSE,
        address="Address Not Specified",
        phone_number="Phone Not Specified",
        email="default@example.com",
        contact_person="System Default",
        created_at=now,
        updated_at=now,
    )
    session.add(contractor)
    session.commit()
    return contractor


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    ensure_data_dirs()
    init_db()

    session = SessionLocal()
    try:
        user = login_or_create(session, "admin@permitpro.com")
        contractor = ensure_default_contractor(session)
        logger.info("User %s (%s), contractor %s", user.email, user.role, contractor.company_name)

        has_packages = session.query(Package).filter(Package.contractor_id == contractor.id).first()
        if has_packages:
            logger.info("Sample packages already present, skipping")
            return

        packages = PackageService(session)
        for customer, address, county, permit_type, status in SAMPLE_PACKAGES:
            package = packages.create_package(
                customer, address, county, permit_type, contractor_id=contractor.id
            )
            if status != package.status:
                packages.update_status(package.id, status)
            logger.info("Created package %s for %s", package.id, customer)
    finally:
        session.close()


if __name__ == "__main__":
    main()
