"""
Transformers Package

Normalization of applicant fields into comparison keys.
"""
from src.caseflow.transformers.record_normalizer import RecordNormalizer

__all__ = ["RecordNormalizer"]
