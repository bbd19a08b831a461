# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/mnemonic.py

"""BIP-39 mnemonic generation for FairOS account signup and import."""

import secrets

from mnemonic import Mnemonic

ENTROPY_BYTES = 16  # 128 bits -> 12 words


def generate_mnemonic(rng=None, language: str = "english") -> str:
    """
    Generate a 12-word BIP-39 mnemonic.

    Args:
        rng: Optional random source with a randbytes(n) method, e.g. a seeded
             random.Random for reproducible phrases. Defaults to the secrets module.
        language: BIP-39 wordlist to use

    Returns:
        Space separated mnemonic phrase
    """
    if rng is None:
        entropy = secrets.token_bytes(ENTROPY_BYTES)
    else:
        entropy = rng.randbytes(ENTROPY_BYTES)
    return Mnemonic(language).to_mnemonic(entropy)
