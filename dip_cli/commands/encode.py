"""
Module 07 - CLI Encode Command

Print the trie key and value bytes committed for revealed leaves. Useful
for tracking down encoding mismatches between a proof producer and this
verifier.

Usage:
    dip encode leaf.json [--block-number-width N] [--json]

The file holds a single leaf document or a list of them.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_hex
from core.dip.leaf_codec import LeafCodec
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import DipException
from core.schemas.transport import RevealedLeafModel


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

_LEAVES_ADAPTER = TypeAdapter(list[RevealedLeafModel])


def load_leaves(path: Path) -> list[Any]:
    """
    Raises:
        ValidationError: If the file does not hold leaf documents
    """
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    return _LEAVES_ADAPTER.validate_python(data)


def encode_cmd(args: Namespace) -> int:
    """Execute the encode command."""
    leaf_path = Path(args.leaf_path)
    config: RuntimeConfig = args.cli_config

    if not leaf_path.exists():
        print(f"Error: Leaf file not found: {leaf_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    width = args.block_number_width or config.verifier.block_number_width
    try:
        codec = LeafCodec(version=config.verifier.commitment_version, block_number_width=width)
        models = load_leaves(leaf_path)
        encoded = []
        for model in models:
            key, value = codec.encode(model.to_leaf())
            encoded.append({"kind": model.kind, "key": to_hex(key), "value": to_hex(value)})
    except (ValidationError, ValueError, DipException) as e:
        print(f"Error encoding leaves: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(dumps_canonical(encoded))
    else:
        for entry in encoded:
            print(f"{entry['kind']}:")
            print(f"  key:   {entry['key']}")
            print(f"  value: {entry['value']}")
    return EXIT_SUCCESS
