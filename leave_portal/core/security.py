import logging
from cryptography.fernet import Fernet, InvalidToken
from leave_portal.core.config import settings

logger = logging.getLogger(__name__)

# Cipher for values persisted in the local state store (auth token)
_cipher = Fernet(settings.encryption_key)


def encrypt_data(data: str) -> str:
    """Encrypt sensitive string data."""
    if not data:
        return data
    try:
        return _cipher.encrypt(data.encode()).decode()
    except Exception as e:
        logger.error(f"Encryption failed: {e}")
        raise ValueError(f"Encryption failed, refusing to store plaintext: {e}") from e


def decrypt_data(encrypted_data: str) -> str:
    """Decrypt sensitive string data. Returns None when the value cannot be decrypted."""
    if not encrypted_data:
        return encrypted_data
    try:
        return _cipher.decrypt(encrypted_data.encode()).decode()
    except InvalidToken:
        logger.warning("Stored value could not be decrypted; discarding it")
        return None
