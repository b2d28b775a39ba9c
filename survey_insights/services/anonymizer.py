"""Response anonymization for privacy-mode exports and displays.

This module strips or generalizes personally identifying data from response
rows before they leave the service. Email hashing is deterministic, so the
same respondent keeps the same pseudonymous address across exports and
rows can still be correlated without exposing the real address.
"""

import copy
import hashlib
import json
from typing import Any, Mapping

from survey_insights.config import get_settings
from survey_insights.services.aggregation.demographics import bucket_age
from survey_insights.services.normalizer import parse_age
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

# Free-text answers longer than this are truncated
MAX_ANSWER_LENGTH = 100
REDACTION_SUFFIX = "... [redacted for privacy]"

# Demographic keys nulled whenever present
SENSITIVE_DEMOGRAPHIC_FIELDS = (
    "phoneNumber",
    "phone",
    "ssn",
    "socialSecurityNumber",
    "dob",
    "dateOfBirth",
    "birthDate",
    "fullName",
)


class ResponseAnonymizer:
    """
    Privacy transformations for survey response rows.

    Rules applied by anonymize_response:
    - respondentEmail becomes anon-<8 hex chars>@<domain>
    - ipAddress is removed
    - demographics.age is generalized to its age bucket
    - city, postalCode and address are removed when city or postal code is present
    - phone numbers, SSNs, birth dates and full names are removed
    - free-text answers over 100 characters are truncated

    Usage example:
        from survey_insights.services.anonymizer import ResponseAnonymizer

        safe_rows = ResponseAnonymizer.anonymize_responses(rows)
    """

    @staticmethod
    def hash_email(email: str) -> str:
        """
        Replace an email with a stable pseudonymous address.

        Args:
            email: Respondent email address

        Returns:
            Address of the form anon-<first 8 hex chars of SHA-256>@<domain>

        Example:
            >>> a = ResponseAnonymizer.hash_email("jane@acme.io")
            >>> a == ResponseAnonymizer.hash_email("jane@acme.io")
            True
            >>> a.startswith("anon-")
            True
        """
        settings = get_settings()
        digest = hashlib.sha256(email.encode("utf-8")).hexdigest()
        return f"anon-{digest[:8]}@{settings.anonymized_email_domain}"

    @staticmethod
    def redact_answer(answer: Any) -> Any:
        """
        Truncate long free-text answers, passing everything else through.

        Example:
            >>> ResponseAnonymizer.redact_answer("short")
            'short'
        """
        if isinstance(answer, str) and len(answer) > MAX_ANSWER_LENGTH:
            return answer[:MAX_ANSWER_LENGTH] + REDACTION_SUFFIX
        return answer

    @staticmethod
    def anonymize_demographics(demographics: dict) -> dict:
        """Generalize or remove identifying demographic fields in place."""
        if demographics.get("age") not in (None, ""):
            age = parse_age(demographics["age"])
            if age is not None:
                demographics["age"] = bucket_age(age)

        if demographics.get("city") or demographics.get("postalCode"):
            demographics["city"] = None
            demographics["postalCode"] = None
            if demographics.get("address"):
                demographics["address"] = None

        for key in SENSITIVE_DEMOGRAPHIC_FIELDS:
            if key in demographics:
                demographics[key] = None

        return demographics

    @staticmethod
    def anonymize_answers(answers: Any) -> Any:
        """Truncate long answers in list-of-{answer} or object-shaped answer sets."""
        if isinstance(answers, list):
            redacted = []
            for item in answers:
                if isinstance(item, dict) and "answer" in item:
                    item = {**item, "answer": ResponseAnonymizer.redact_answer(item["answer"])}
                redacted.append(item)
            return redacted
        if isinstance(answers, dict):
            return {key: ResponseAnonymizer.redact_answer(value) for key, value in answers.items()}
        return answers

    @staticmethod
    def anonymize_response(row: Mapping[str, Any]) -> dict[str, Any]:
        """
        Return an anonymized deep copy of one response row.

        JSON-encoded ``demographics`` and ``responses`` values are decoded,
        anonymized and re-encoded so the row keeps its original shape.
        Undecodable strings are left as they are.

        Args:
            row: Response row (camelCase keys)

        Returns:
            New dict with isAnonymized set to True; the input is untouched
        """
        anonymized = copy.deepcopy(dict(row))

        email = anonymized.get("respondentEmail")
        if isinstance(email, str) and email:
            anonymized["respondentEmail"] = ResponseAnonymizer.hash_email(email)

        anonymized["ipAddress"] = None

        demographics = ResponseAnonymizer._decoded(anonymized.get("demographics"))
        if isinstance(demographics, dict):
            ResponseAnonymizer.anonymize_demographics(demographics)
            anonymized["demographics"] = ResponseAnonymizer._reencoded(
                anonymized["demographics"], demographics
            )

        answers = ResponseAnonymizer._decoded(anonymized.get("responses"))
        if isinstance(answers, (list, dict)):
            anonymized["responses"] = ResponseAnonymizer._reencoded(
                anonymized["responses"], ResponseAnonymizer.anonymize_answers(answers)
            )

        anonymized["isAnonymized"] = True
        return anonymized

    @staticmethod
    def anonymize_responses(rows: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Anonymize every row in a response list."""
        if not isinstance(rows, list):
            return []
        logger.debug(f"Anonymizing {len(rows)} responses")
        return [ResponseAnonymizer.anonymize_response(row) for row in rows]

    @staticmethod
    def _decoded(value: Any) -> Any:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                logger.warning("Could not decode JSON field during anonymization, leaving as is")
                return value
        return value

    @staticmethod
    def _reencoded(original: Any, value: Any) -> Any:
        return json.dumps(value) if isinstance(original, str) else value
