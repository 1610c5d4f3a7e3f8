"""Persistent per-installation salt (32 random bytes in .hcs_salt)."""
import os
import secrets

from loguru import logger

import config
from hcs.errors import ConfigurationError


def load_or_create_salt(directory: str = ".") -> bytes:
    """
    Read <directory>/.hcs_salt, or create it when missing or the wrong size.

    A new salt is 32 bytes from the OS CSPRNG, written with mode 0600.
    Every CHIP and signature depends on it, so replacing the file changes
    every code this installation produces.
    """
    path = os.path.join(directory or ".", config.SALT_FILE_NAME)

    try:
        with open(path, "rb") as f:
            salt = f.read()
        if len(salt) == config.SALT_SIZE:
            return salt
        logger.warning(f"Salt file {path} has {len(salt)} bytes, regenerating")
    except FileNotFoundError:
        logger.info(f"No salt file at {path}, creating one")
    except OSError as e:
        raise ConfigurationError(f"failed to read salt: {e}") from e

    salt = secrets.token_bytes(config.SALT_SIZE)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(salt)
        os.chmod(path, 0o600)
    except OSError as e:
        raise ConfigurationError(f"failed to save salt: {e}") from e
    return salt
