from loguru import logger
from sqlmodel import Session

from app.core.errors import DuplicateIdentity
from app.db.core import engine, init_db
from app.models.certificate import CertificateCreate
from app.repositories.sql import SqlCertificateRepository
from app.services.certificate import CertificateService


# Demo certificates for local development
DEMO_CERTIFICATES = [
    {
        "student_name": "Aarav Sharma",
        "roll_number": "CS-123",
        "certificate_id": "JHU-84321-2023",
        "issue_date": "2023-05-20",
        "course": "B.Sc. Computer Science",
        "institution": "Johns Hopkins University",
    },
    {
        "student_name": "Meera Iyer",
        "roll_number": "EE-207",
        "certificate_id": "MIT-11872-2022",
        "issue_date": "2022-06-15",
        "course": "M.Eng. Electrical Engineering",
        "institution": "Massachusetts Institute of Technology",
    },
    {
        "student_name": "Liam O'Connor",
        "roll_number": "ME-042",
        "certificate_id": "TCD-50931-2021",
        "issue_date": "2021-11-02",
        "course": "B.E. Mechanical Engineering",
        "institution": "Trinity College Dublin",
    },
]


def seed_certificates(service: CertificateService):
    """Issues the demo certificates, skipping any already present."""
    logger.info("--- Seeding Certificates ---")

    for data in DEMO_CERTIFICATES:
        try:
            issued = service.issue_certificate(CertificateCreate(**data))
            logger.info(
                f"Created Certificate: {data['certificate_id']} ({issued.certificate_hash})")
        except DuplicateIdentity:
            logger.info(f"Existing Certificate: {data['certificate_id']}")


def main():
    init_db()

    with Session(engine) as session:
        try:
            seed_certificates(CertificateService(SqlCertificateRepository(session)))
            logger.info("Database seeding completed successfully.")

        except Exception as e:
            session.rollback()
            logger.error(f"Seeding failed: {e}")
            raise e


if __name__ == "__main__":
    main()
