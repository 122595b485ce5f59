"""
Record Normalization Transformer

Builds the comparison keys used to spot applicants entered more than once.
"""
import re
from typing import Iterable, Optional

from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)


class RecordNormalizer:
    """
    Normalizes applicant names and property addresses into match keys.

    Matching is crude: case and punctuation differences are
    folded, but there is no unicode folding, abbreviation expansion or
    fuzzy matching.
    """

    WHITESPACE_PATTERN = re.compile(r'\s+')
    ADDRESS_PUNCTUATION = ('.', ',')

    @classmethod
    def normalize_name(cls, full_name: Optional[str]) -> str:
        """
        Normalize a full name for comparison.

        Args:
            full_name: Name as entered

        Returns:
            Trimmed, lowercased name with inner whitespace runs collapsed
            ('' for missing names)
        """
        if not full_name:
            return ''
        return cls.WHITESPACE_PATTERN.sub(' ', full_name.strip().lower())

    @classmethod
    def normalize_address(cls, address: Optional[str]) -> str:
        """
        Normalize a street address for comparison.

        Example: "  123 Main St.,  Apt 4 " -> "123 main st apt 4"

        Args:
            address: Street address as entered

        Returns:
            Lowercased address with whitespace runs collapsed and
            periods/commas removed ('' for missing addresses)
        """
        if not address:
            return ''

        normalized = address.strip().lower()
        normalized = cls.WHITESPACE_PATTERN.sub(' ', normalized)
        for mark in cls.ADDRESS_PUNCTUATION:
            normalized = normalized.replace(mark, '')
        return normalized

    @staticmethod
    def group_key(record_ids: Iterable[str]) -> str:
        """
        Identity of a group: its member ids, sorted and joined.

        Two groups with the same members produce the same key regardless
        of member order or how they were matched.
        """
        return '-'.join(sorted(str(record_id) for record_id in record_ids))
