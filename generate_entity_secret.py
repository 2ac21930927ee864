#!/usr/bin/env python3
"""
Generate a Circle entity secret and optionally register it.

The secret is generated locally and shown once. Registration needs a real
CIRCLE_API_KEY; when it fails the secret is still valid and can be
registered manually in the Circle Console.
"""

import sys
from typing import Callable, Optional

from config import Credential, classify_credential, load_settings
from providers import EntitySecretRegistrar
from wallets import CircleEntitySecretRegistrar, generate_entity_secret


def run(
    api_key: Optional[str],
    registrar: EntitySecretRegistrar,
    generate: Callable[[], str] = generate_entity_secret,
) -> str:
    print("Generating your Entity Secret...\n")

    entity_secret = generate()
    print("YOUR 64-CHARACTER ENTITY SECRET (SAVE THIS IMMEDIATELY):")
    print("=" * 64)
    print(entity_secret)
    print("=" * 64 + "\n")
    print("SECURITY WARNING:")
    print("1. Copy the string above and store it in your secrets as CIRCLE_ENTITY_SECRET.")
    print("2. Store it in a secure, private place. You cannot recover it if lost.")
    print("3. Circle does NOT store this secret.\n")

    if classify_credential(api_key) is Credential.PRESENT:
        print("Attempting to register the secret with Circle...")
        try:
            registrar.register(api_key, entity_secret)
        except Exception as e:
            print("Registration failed. You may need to register it manually in the Circle Console.",
                  file=sys.stderr)
            print(f"   Error: {e}", file=sys.stderr)
        else:
            print("Entity Secret registered successfully.")
            print("   Please download and securely store the recovery file from the Circle Console.")
    else:
        print("Skipping automatic registration.")
        print("   To complete setup, you must manually register this secret in the Circle Console.")
        print("   Go to: Wallets -> Developer-Controlled Wallets -> Configurator")

    return entity_secret


def main() -> int:
    settings = load_settings()
    run(settings.circle_api_key, CircleEntitySecretRegistrar(settings.circle_recovery_dir))
    return 0


if __name__ == "__main__":
    sys.exit(main())
