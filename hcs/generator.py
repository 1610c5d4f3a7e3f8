"""
Generator — single entry point from an input profile to every HCS code.

Pipeline:
  1. Validate (strict, optional)
  2. Normalize → CHIP
  3. U3 and/or U4
  4. With birth info: BaZi → fusion → U5 (degrades to a warning on failure)
  5. Canonical bytes → QSIG + B3 → U7
"""
from typing import Optional

from loguru import logger

import config
from hcs.bazi import compute_chinese_profile
from hcs.canonical import canonical_profile_data
from hcs.codec_u3 import encode_u3
from hcs.codec_u4 import encode_u4
from hcs.codec_u5 import encode_u5
from hcs.codec_u7 import format_u7
from hcs.crypto import compute_signatures, generate_chip
from hcs.errors import ConfigurationError, HCSError
from hcs.fusion import CombinedProfile, WesternProfile, build_fusion_profile
from hcs.model import InputProfile, Output
from hcs.normalizer import apply_interaction_defaults, normalize_profile, validate_profile
from hcs.salt import load_or_create_salt


class Generator:
    """
    Produces HCS codes for one installation.

    The salt and secret are fixed for the generator's lifetime and never
    logged. Calls share no mutable state, so one instance can serve any
    number of profiles.
    """

    def __init__(self, salt: bytes, secret: bytes):
        if not salt:
            raise ConfigurationError("salt must not be empty")
        if not secret:
            raise ConfigurationError("secret key must not be empty")
        self._salt = salt
        self._secret = secret

    def generate(
        self,
        profile: InputProfile,
        u3_only: bool = False,
        u4_only: bool = False,
        validate: bool = True,
    ) -> Output:
        if validate:
            validate_profile(profile)
        profile = apply_interaction_defaults(profile)

        normalized = normalize_profile(profile)
        chip = generate_chip(self._salt, normalized)
        output = Output(input=profile, chip=chip)

        if not u4_only:
            output.code_u3 = encode_u3(profile, chip)
        if not u3_only:
            output.code_u4 = encode_u4(normalized, chip)

        if profile.birth_info is not None:
            self._add_fusion(profile, output)

        canonical = canonical_profile_data(normalized, output.combined_profile)
        qsig, b3 = compute_signatures(canonical, self._secret, self._salt)

        output.code_u7 = format_u7(normalized, qsig, b3)
        output.qsig = qsig
        output.b3sig = b3

        logger.debug(f"Generated codes for CHIP {chip} (U5: {'yes' if output.code_u5 else 'no'})")
        return output

    def _add_fusion(self, profile: InputProfile, output: Output):
        """Chinese profile, combined profile and U5. Failures are logged, not raised."""
        try:
            chinese = compute_chinese_profile(profile.birth_info)
        except HCSError as e:
            logger.warning(f"Failed to compute Chinese profile: {e.message}")
            return

        output.chinese_profile = chinese
        western = WesternProfile.from_input(profile)
        fusion = build_fusion_profile(western, chinese)
        output.combined_profile = CombinedProfile(western=western, chinese=chinese, fusion=fusion)

        try:
            output.code_u5 = encode_u5(western, chinese, fusion, self._salt)
        except HCSError as e:
            logger.warning(f"Failed to generate U5 code: {e.message}")


def generator_from_config(salt_dir: Optional[str] = None) -> Generator:
    """Generator wired to the configured salt directory and HCS_SECRET_KEY."""
    salt = load_or_create_salt(salt_dir or config.SALT_DIR)
    return Generator(salt, config.load_secret_key())
