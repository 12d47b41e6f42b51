"""Borrower registration from verified academic records"""

from dataclasses import replace
from typing import Optional

from adanfo_gateway.domain.exceptions import NotFoundError, ValidationError
from adanfo_gateway.domain.models import AcademicRecord, BorrowerProfile
from adanfo_gateway.domain.ports import BorrowerProfileStore
from adanfo_gateway.services.locks import KeyedLock


class BorrowerRegistry:
    """Creates and refreshes borrower profiles; never touches credit scores after creation.

    Share the CreditLedger's KeyedLock so a refresh cannot overwrite a
    concurrent score update.
    """

    def __init__(self, profiles: BorrowerProfileStore, locks: Optional[KeyedLock] = None):
        self.profiles = profiles
        self.locks = locks or KeyedLock()

    def get(self, borrower_ref: str) -> BorrowerProfile:
        profile = self.profiles.get(borrower_ref)
        if profile is None:
            raise NotFoundError(f"Borrower {borrower_ref} not found")
        return profile

    def register(self, borrower_ref: str, display_name: str, record: AcademicRecord) -> BorrowerProfile:
        """
        Register a borrower whose academic record the verifier has vouched for.

        New borrowers start without a credit score (0). Re-registration refreshes
        the academic fields and keeps the existing score.
        """
        if not borrower_ref:
            raise ValidationError("borrower reference is required")
        if not record.institution:
            raise ValidationError("institution is required")
        if not 0.0 <= record.gpa <= 4.0:
            raise ValidationError("GPA must be between 0.0 and 4.0")

        with self.locks.hold(borrower_ref):
            existing = self.profiles.get(borrower_ref)
            if existing is not None:
                profile = replace(
                    existing,
                    display_name=display_name or existing.display_name,
                    is_enrolled=record.is_enrolled,
                    institution=record.institution,
                    gpa=record.gpa,
                    completion_date=record.completion_date,
                    is_verified=True,
                )
            else:
                profile = BorrowerProfile(
                    borrower_ref=borrower_ref,
                    display_name=display_name or borrower_ref,
                    is_enrolled=record.is_enrolled,
                    institution=record.institution,
                    gpa=record.gpa,
                    completion_date=record.completion_date,
                    credit_score=0,
                    is_verified=True,
                )
            self.profiles.put(profile)

        return profile
