#!/usr/bin/env python3
"""
Create the server wallet that receives x402 payments.

Creates a wallet set and one smart contract account wallet inside it, then
prints the address to store as SERVER_WALLET_ADDRESS. Nothing is persisted
locally, so a failure leaves nothing to clean up.
"""

import sys
from typing import Callable, Optional

from config import load_settings
from providers import WalletInfo, WalletProvisioner
from wallets import CircleWalletProvisioner, vendor_error_details

WALLET_SET_NAME = "Hackathon Server Wallets"
TARGET_BLOCKCHAIN = "ARC-TESTNET"


def create_server_wallet(
    provisioner: WalletProvisioner,
    name: str = WALLET_SET_NAME,
    blockchain: str = TARGET_BLOCKCHAIN,
) -> Optional[WalletInfo]:
    """Returns the new wallet, or None if any vendor call failed."""
    try:
        wallet_set_id = provisioner.create_wallet_set(name)
        print(f"Wallet Set Created. ID: {wallet_set_id}")

        wallets = provisioner.create_wallets(wallet_set_id, [blockchain], count=1, account_type="SCA")
        server_wallet = wallets[0]
    except Exception as e:
        report_failure(e)
        return None

    print("\nSERVER WALLET CREATED SUCCESSFULLY!")
    print("=" * 43)
    print(f"Address: {server_wallet.address}")
    print(f"Blockchain: {server_wallet.blockchain}")
    print("=" * 43 + "\n")
    print('IMPORTANT: Copy the "Address" above.')
    print("   Add it to your secrets as: SERVER_WALLET_ADDRESS")
    return server_wallet


def report_failure(error: Exception) -> None:
    print(f"Failed to create wallet: {error}", file=sys.stderr)
    print(f"   Details: {vendor_error_details(error)}", file=sys.stderr)


def main(provisioner_factory: Optional[Callable[[], WalletProvisioner]] = None) -> int:
    print("Creating your Server Wallet...\n")

    if provisioner_factory is None:
        settings = load_settings()

        def provisioner_factory():
            return CircleWalletProvisioner(settings.circle_api_key, settings.circle_entity_secret)

    try:
        provisioner = provisioner_factory()
    except Exception as e:
        report_failure(e)
        return 1

    return 0 if create_server_wallet(provisioner) else 1


if __name__ == "__main__":
    sys.exit(main())
