"""Academic verifier HTTP client for fetching verified student records"""

import httpx
from datetime import date
from adanfo_gateway.domain.models import AcademicRecord
from adanfo_gateway.domain.exceptions import NotFoundError, VerifierAPIError
from adanfo_gateway.config import settings


class VerifierClient:
    """Client for the external eligibility verifier.

    The verification itself (identity proofing, GPA lookup) happens on the
    verifier's side; the gateway only consumes the verified attributes.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.verifier_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_academic_record(self, borrower_ref: str) -> AcademicRecord:
        """
        Fetch the verified academic record of a student.

        Raises:
            NotFoundError: Verifier has no record for this student
            VerifierAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/verifier/students/{borrower_ref}")
                if response.status_code == 404:
                    raise NotFoundError(f"No verified academic record for {borrower_ref}")
                response.raise_for_status()
                data = response.json()

                return AcademicRecord(
                    is_enrolled=bool(data["is_enrolled"]),
                    institution=data["institution"],
                    gpa=float(data["gpa"]),
                    completion_date=date.fromisoformat(data["completion_date"]),
                )

            except httpx.TimeoutException as e:
                raise VerifierAPIError(f"Verifier timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise VerifierAPIError(f"Verifier error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise VerifierAPIError(f"Verifier unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise VerifierAPIError(f"Invalid academic record from verifier: {e}") from e
