"""
intl_extract — Intl message extraction for Dart sources

Finds Intl.message / Intl.plural / Intl.gender / Intl.select calls in
Dart code and turns each into a named message record for translation
catalogs.

Usage:
    from intl_extract import extract

    messages, warnings = extract(source_text, "lib/messages.dart")
    for name, message in messages.items():
        print(name, message.expanded())
"""

__version__ = "0.1.0"

from .config import ExtractionConfig, ConfigManager
from .extraction import ExtractionSession, SourceParseError, extract
from .messages import MainMessage, MessageExtractionError, Plural, Gender, Select

__all__ = [
    '__version__',
    'ExtractionConfig',
    'ConfigManager',
    'ExtractionSession',
    'SourceParseError',
    'extract',
    'MainMessage',
    'MessageExtractionError',
    'Plural',
    'Gender',
    'Select',
]
