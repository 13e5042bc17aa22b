from .assembler import ExportBundle, ProfileExporter
from .cipher import EncryptedDocument, encrypt_with_random_key

__all__ = ["ExportBundle", "ProfileExporter", "EncryptedDocument", "encrypt_with_random_key"]
