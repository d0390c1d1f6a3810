"""
Example: two cosigners spending from a shared multisig address.

Run against a live node:
    TANGLESIG_NODES=https://node.example.org:443 python examples/multisig_flow.py
"""

import json
import logging
import os

from tanglesig import Multisig, NodeClient, Transfer

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("examples.multisig_flow")

SEED_A = os.environ.get("SEED_A", "ABCDEFGHIJKLMNOPQRSTUVWXYZ9" * 3)
SEED_B = os.environ.get("SEED_B", "ZYXWVUTSRQPONMLKJIHGFEDCBA9" * 3)
RECIPIENT = os.environ.get("RECIPIENT", "RECIPIENT" + "9" * 72)


def main():
    with NodeClient() as client:
        multisig = Multisig(client)

        # Both cosigners publish digests; order A, B is part of the address
        address = multisig.address([
            multisig.get_digest(SEED_A, 0, 3),
            multisig.get_digest(SEED_B, 0, 3),
        ]).finalize()

        remainder = multisig.address([
            multisig.get_digest(SEED_A, 1, 3),
            multisig.get_digest(SEED_B, 1, 3),
        ]).finalize()

        logger.info(f"Multisig address: {address}")

        bundle = multisig.initiate_transfer(
            security_sum=6,
            input_address=address,
            remainder_address=remainder,
            transfers=[Transfer(address=RECIPIENT, value=1, tag="TANGLESIG")],
        )

        # In practice the bundle travels between cosigners as JSON
        bundle = multisig.add_signature(bundle, address, multisig.get_key(SEED_A, 0, 3))
        bundle = multisig.add_signature(bundle, address, multisig.get_key(SEED_B, 0, 3))

        if multisig.validate_signatures(bundle, address):
            print(json.dumps(bundle.to_dict(), indent=2))
        else:
            logger.error("Signatures did not validate")


if __name__ == "__main__":
    main()
