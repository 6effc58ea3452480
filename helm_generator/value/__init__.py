"""
Value processing package

Classifies raw manifest values and externalizes large ones into chart files.
"""
from .classifier import DataType, detect_type
from .processor import ProcessedValue, ValueProcessor, checksum_of
from .external import ExternalFile, ExternalFileManager

__all__ = [
    'DataType',
    'detect_type',
    'ProcessedValue',
    'ValueProcessor',
    'checksum_of',
    'ExternalFile',
    'ExternalFileManager',
]
