"""
Module 05 - Revealed Leaf Aggregation
Folds verified leaves into the bounded, typed result of a DIP proof.

Owner: Protocol/Crypto Engineer
Module ID: M05

Leaves are folded in proof order:
- DidKeyLeaf        appended to the keys list, error when it is full
- Web3NameLeaf      replaces any name seen before it, never an error
- LinkedAccountLeaf appended to the accounts list, error when it is full

The fold is all-or-nothing: working lists are local to the call and only
frozen into a result once every leaf has been folded.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Optional, TypeVar, Union

from core.dip.leaves import (
    DidKeyLeaf,
    DidKeyRelationship,
    DidPublicKeyDetails,
    LinkableAccountId,
    LinkedAccountLeaf,
    RevealedLeaf,
    Web3NameLeaf,
)
from core.schemas.errors import (
    DidMerkleProofVerificationException,
    DidMerkleProofVerifierError,
)


T = TypeVar("T")


class BoundedList(Generic[T]):
    """
    List with a fixed capacity.

    `try_push` reports overflow with an explicit False instead of growing
    or silently dropping the item.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        self._capacity = capacity
        self._items: list[T] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self._capacity

    def try_push(self, item: T) -> bool:
        """Append `item`; returns False, leaving the list unchanged, when full."""
        if self.is_full:
            return False
        self._items.append(item)
        return True

    def freeze(self) -> tuple[T, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"BoundedList(capacity={self._capacity}, items={self._items!r})"


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class RevealedDidKey:
    """A DID key revealed by a verified proof."""
    id: bytes
    relationship: DidKeyRelationship
    details: DidPublicKeyDetails


@dataclass(frozen=True)
class RevealedWeb3Name:
    """A web3name revealed by a verified proof."""
    web3_name: str
    claimed_at: int


RevealedKey = Union[RevealedDidKey, RevealedWeb3Name, LinkableAccountId]


@dataclass(frozen=True)
class RevealedDidMerkleProofLeaves:
    """
    Everything a verified DIP proof reveals about a DID.

    Attributes:
        did_keys: Revealed keys, in proof order
        web3_name: The last revealed web3name, if any
        linked_accounts: Revealed linked accounts, in proof order
    """
    did_keys: tuple[RevealedDidKey, ...] = ()
    web3_name: Optional[RevealedWeb3Name] = None
    linked_accounts: tuple[LinkableAccountId, ...] = ()

    def iter_keys(self) -> Iterator[RevealedDidKey]:
        return iter(self.did_keys)

    def __iter__(self) -> Iterator[RevealedKey]:
        yield from self.did_keys
        if self.web3_name is not None:
            yield self.web3_name
        yield from self.linked_accounts

    @property
    def is_empty(self) -> bool:
        return not self.did_keys and self.web3_name is None and not self.linked_accounts


def aggregate_revealed_leaves(
    revealed: Iterable[RevealedLeaf],
    max_revealed_keys: int,
    max_revealed_accounts: int,
) -> RevealedDidMerkleProofLeaves:
    """
    Fold revealed leaves into a RevealedDidMerkleProofLeaves.

    Args:
        revealed: Leaves in proof order
        max_revealed_keys: Capacity of the keys list
        max_revealed_accounts: Capacity of the linked accounts list

    Raises:
        DidMerkleProofVerificationException: TOO_MANY_REVEALED_KEYS or
            TOO_MANY_REVEALED_ACCOUNTS when a list would overflow
        TypeError: On an object that is not a revealed leaf
    """
    keys: BoundedList[RevealedDidKey] = BoundedList(max_revealed_keys)
    accounts: BoundedList[LinkableAccountId] = BoundedList(max_revealed_accounts)
    web3_name: Optional[RevealedWeb3Name] = None

    for leaf in revealed:
        if isinstance(leaf, DidKeyLeaf):
            pushed = keys.try_push(
                RevealedDidKey(id=leaf.key_id, relationship=leaf.relationship, details=leaf.details)
            )
            if not pushed:
                raise DidMerkleProofVerificationException(
                    DidMerkleProofVerifierError.TOO_MANY_REVEALED_KEYS
                )
        elif isinstance(leaf, Web3NameLeaf):
            web3_name = RevealedWeb3Name(web3_name=leaf.web3_name, claimed_at=leaf.claimed_at)
        elif isinstance(leaf, LinkedAccountLeaf):
            if not accounts.try_push(leaf.account):
                raise DidMerkleProofVerificationException(
                    DidMerkleProofVerifierError.TOO_MANY_REVEALED_ACCOUNTS
                )
        else:
            raise TypeError(f"Unknown revealed leaf type: {type(leaf).__name__}")

    return RevealedDidMerkleProofLeaves(
        did_keys=keys.freeze(),
        web3_name=web3_name,
        linked_accounts=accounts.freeze(),
    )


__all__ = [
    "BoundedList",
    "RevealedDidKey",
    "RevealedWeb3Name",
    "RevealedKey",
    "RevealedDidMerkleProofLeaves",
    "aggregate_revealed_leaves",
]
