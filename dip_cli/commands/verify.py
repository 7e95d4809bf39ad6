"""
Module 07 - CLI Verify Command

Verify a DIP proof document offline against its identity commitment.

Usage:
    dip verify proof.json [--root 0x...] [--max-keys N] [--max-accounts N]
                          [--hasher NAME] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from core.config.runtime import RuntimeConfig, VerifierConfig
from core.dip.service import DipProofVerifier
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import DidMerkleProofVerificationException, DipException
from core.schemas.transport import DipProofDocument, RevealedLeavesView


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    identity_commitment: str = ""
    hasher: str = ""
    ok: bool = False
    error_code: Optional[int] = None
    error: Optional[str] = None
    result: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.ok:
            del d["error_code"]
            del d["error"]
        else:
            del d["result"]
        return d


def load_document(path: Path) -> DipProofDocument:
    """
    Raises:
        FileNotFoundError: If `path` does not exist
        ValueError: If the file is not a valid proof document
    """
    with open(path) as f:
        data = json.load(f)
    return DipProofDocument.model_validate(data)


def build_verifier_config(base: VerifierConfig, args: Namespace) -> VerifierConfig:
    """Apply command-line overrides to the configured verifier settings."""
    overrides: dict[str, Any] = {}
    if args.max_keys is not None:
        overrides["max_revealed_keys"] = args.max_keys
    if args.max_accounts is not None:
        overrides["max_revealed_accounts"] = args.max_accounts
    if args.hasher is not None:
        overrides["hasher"] = args.hasher
    return replace(base, **overrides)


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"identity_commitment: {summary.identity_commitment}")
    print(f"hasher: {summary.hasher}")
    print(f"verified: {str(summary.ok).lower()}")

    if not summary.ok:
        print(f"error_code: {summary.error_code}")
        print(f"error: {summary.error}")
        return

    did_keys = summary.result.get("did_keys", [])
    print(f"\ndid_keys ({len(did_keys)}):")
    for key in did_keys:
        print(f"  - {key['id']} [{key['relationship']}] {key['key_type']} {key['public_key']} @ {key['block_number']}")

    web3_name = summary.result.get("web3_name")
    if web3_name:
        print(f"web3_name: {web3_name['web3_name']} (claimed at {web3_name['claimed_at']})")
    else:
        print("web3_name: (none)")

    accounts = summary.result.get("linked_accounts", [])
    print(f"linked_accounts ({len(accounts)}):")
    for account in accounts:
        print(f"  - {account['account_kind']} {account['account_id']}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as canonical JSON (sorted keys, null fields omitted)."""
    print(dumps_canonical(summary.to_dict()))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if the proof verifies, 2 if it is rejected, 1 on any other error
    """
    proof_path = Path(args.proof_path)
    config: RuntimeConfig = args.cli_config

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        document = load_document(proof_path)
        if args.root is not None:
            document = DipProofDocument.model_validate(
                {**document.model_dump(), "identity_commitment": args.root}
            )
    except (ValidationError, ValueError) as e:
        print(f"Error loading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        verifier = DipProofVerifier(build_verifier_config(config.verifier, args))
    except (DipException, ValueError) as e:
        print(f"Error configuring verifier: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        proof_path=str(proof_path),
        identity_commitment=document.identity_commitment,
        hasher=verifier.hasher.name,
    )

    try:
        result = verifier.verify_document(document, config.limits)
    except DidMerkleProofVerificationException as e:
        summary.ok = False
        summary.error_code = e.error_code
        summary.error = e.error.name
    except DipException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    else:
        summary.ok = True
        summary.result = RevealedLeavesView.from_result(result).model_dump(mode="json")

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
