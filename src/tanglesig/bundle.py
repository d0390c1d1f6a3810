"""
tanglesig/bundle.py

Bundle: the ordered, append-only set of ledger entries that make up one
atomic transfer.

Bundles are immutable snapshots. Every operation (adding entries,
finalizing, attaching message or signature fragments) returns a new
Bundle, so a snapshot handed to a cosigner can never be changed under
them.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .config import (
    ADDRESS_LENGTH,
    EMPTY_FRAGMENT,
    HASH_LENGTH,
    INDEX_TRITS,
    MAX_TRYTE_VALUE,
    TIMESTAMP_TRITS,
    VALUE_TRITS,
)
from .crypto import signing
from .crypto.converter import (
    increment_trits,
    int_to_trits,
    is_filler,
    trits_to_trytes,
    trytes_to_trits,
)
from .crypto.kerl import Kerl
from .errors import ValidationError

logger = logging.getLogger("tanglesig.bundle")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

class FragmentState(Enum):
    """What the signature/message fragment slot of an entry holds."""
    EMPTY = "empty"           # Filler, waiting for a signature
    MESSAGE = "message"       # Message payload of an output
    SIGNED = "signed"         # Signature fragment written by a cosigner


@dataclass(frozen=True)
class BundleEntry:
    """One ledger entry of a bundle."""
    address: str
    value: int
    tag: str
    timestamp: int
    obsolete_tag: str = ""
    signature_message_length: int = 1
    current_index: int = 0
    last_index: int = 0
    signature_message_fragment: str = EMPTY_FRAGMENT
    bundle_hash: str = ""
    fragment_state: FragmentState = FragmentState.EMPTY

    @property
    def is_signed(self) -> bool:
        return self.fragment_state is FragmentState.SIGNED

    @property
    def is_unsigned(self) -> bool:
        return self.fragment_state is FragmentState.EMPTY

    def essence_trits(self) -> List[int]:
        """Trits hashed into the bundle hash for this entry."""
        trits = trytes_to_trits(self.address[:ADDRESS_LENGTH])
        trits.extend(int_to_trits(self.value, VALUE_TRITS))
        trits.extend(trytes_to_trits(self.obsolete_tag or self.tag))
        trits.extend(int_to_trits(self.timestamp, TIMESTAMP_TRITS))
        trits.extend(int_to_trits(self.current_index, INDEX_TRITS))
        trits.extend(int_to_trits(self.last_index, INDEX_TRITS))
        return trits

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "value": self.value,
            "tag": self.tag,
            "obsolete_tag": self.obsolete_tag,
            "timestamp": self.timestamp,
            "signature_message_length": self.signature_message_length,
            "current_index": self.current_index,
            "last_index": self.last_index,
            "signature_message_fragment": self.signature_message_fragment,
            "bundle_hash": self.bundle_hash,
            "fragment_state": self.fragment_state.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BundleEntry":
        """
        Restore an entry received from another cosigner.

        Raises:
            ValidationError: Missing or malformed fields
        """
        try:
            return cls._from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed bundle entry: {e!r}") from e

    @classmethod
    def _from_dict(cls, data: dict) -> "BundleEntry":
        fragment = data.get("signature_message_fragment") or EMPTY_FRAGMENT
        state = data.get("fragment_state")
        if state is None:
            # Entries from filler-convention producers
            state = FragmentState.EMPTY if is_filler(fragment) else FragmentState.SIGNED
        else:
            state = FragmentState(state)

        return cls(
            address=data["address"],
            value=int(data["value"]),
            tag=data["tag"],
            obsolete_tag=data.get("obsolete_tag") or data["tag"],
            timestamp=int(data["timestamp"]),
            signature_message_length=int(data.get("signature_message_length", 1)),
            current_index=int(data.get("current_index", 0)),
            last_index=int(data.get("last_index", 0)),
            signature_message_fragment=fragment,
            bundle_hash=data.get("bundle_hash", ""),
            fragment_state=state,
        )


def essence_hash(entries: Sequence[BundleEntry]) -> str:
    """Kerl hash over the essence of the entries, in order."""
    kerl = Kerl()
    for entry in entries:
        kerl.absorb(entry.essence_trits())
    return trits_to_trytes(kerl.squeeze(HASH_LENGTH))


# ============================================================================
# BUNDLE
# ============================================================================

@dataclass(frozen=True)
class Bundle:
    """
    Immutable bundle snapshot.

    Example:
        bundle = Bundle()
        bundle = bundle.add_entry(1, output_address, 50, tag, timestamp)
        bundle = bundle.add_entry(2, input_address, -50, tag, timestamp)
        bundle = bundle.finalize()
    """
    entries: Tuple[BundleEntry, ...] = field(default_factory=tuple)
    finalized: bool = False

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[BundleEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> BundleEntry:
        return self.entries[index]

    @property
    def hash(self) -> Optional[str]:
        """Shared bundle hash, or None before finalization."""
        if not self.finalized or not self.entries:
            return None
        return self.entries[0].bundle_hash

    @property
    def balance(self) -> int:
        """Sum of all entry values; zero for a balanced bundle."""
        return sum(entry.value for entry in self.entries)

    def entries_for(self, address: str) -> List[BundleEntry]:
        """Entries carrying an address, in bundle order."""
        return [entry for entry in self.entries if entry.address == address]

    def add_entry(
        self,
        signature_message_length: int,
        address: str,
        value: int,
        tag: str,
        timestamp: int,
    ) -> "Bundle":
        """
        Append `signature_message_length` contiguous entries.

        The first entry carries `value`; the rest carry zero and act as
        carriers for further message or signature fragments.

        Returns:
            New Bundle with the entries appended
        """
        if self.finalized:
            raise ValueError("Cannot add entries to a finalized bundle")
        if signature_message_length < 1:
            raise ValueError(
                f"signature_message_length must be >= 1, got {signature_message_length}"
            )

        added = tuple(
            BundleEntry(
                address=address,
                value=value if i == 0 else 0,
                tag=tag,
                obsolete_tag=tag,
                timestamp=timestamp,
                signature_message_length=signature_message_length,
            )
            for i in range(signature_message_length)
        )
        return replace(self, entries=self.entries + added)

    def finalize(self) -> "Bundle":
        """
        Compute the bundle hash and fill every fragment slot with filler.

        If the normalized hash contains a 13 (which would sign with an
        unhashed key chunk), the first entry's obsolete tag is incremented
        and the hash recomputed.

        Returns:
            Finalized Bundle
        """
        if self.finalized:
            raise ValueError("Bundle is already finalized")
        if not self.entries:
            raise ValueError("Cannot finalize an empty bundle")

        last_index = len(self.entries) - 1
        entries = [
            replace(entry, current_index=i, last_index=last_index)
            for i, entry in enumerate(self.entries)
        ]

        attempts = 0
        while True:
            bundle_hash = essence_hash(entries)

            if MAX_TRYTE_VALUE not in signing.normalized_bundle(bundle_hash):
                break

            attempts += 1
            first = entries[0]
            tag_trits = increment_trits(trytes_to_trits(first.obsolete_tag))
            entries[0] = replace(first, obsolete_tag=trits_to_trytes(tag_trits))

        if attempts:
            logger.debug(f"Bundle hash rerolled {attempts} time(s) to avoid insecure normalization")

        entries = [
            replace(
                entry,
                bundle_hash=bundle_hash,
                signature_message_fragment=EMPTY_FRAGMENT,
                fragment_state=FragmentState.EMPTY,
            )
            for entry in entries
        ]
        logger.debug(f"Finalized bundle {bundle_hash} with {len(entries)} entries")
        return Bundle(entries=tuple(entries), finalized=True)

    def add_trytes(self, fragments: Sequence[str]) -> "Bundle":
        """
        Attach message fragments to entries, position by position.

        Entry i receives fragments[i]; entries past the end of the list
        keep their filler fragment.

        Returns:
            New Bundle with message fragments attached
        """
        if not self.finalized:
            raise ValueError("Message fragments are attached after finalization")
        if len(fragments) > len(self.entries):
            raise ValueError(
                f"{len(fragments)} fragments for a bundle of {len(self.entries)} entries"
            )

        entries = list(self.entries)
        for i, fragment in enumerate(fragments):
            entries[i] = replace(
                entries[i],
                signature_message_fragment=fragment,
                fragment_state=FragmentState.MESSAGE,
            )
        return replace(self, entries=tuple(entries))

    def normalized_bundle(self) -> List[int]:
        """Normalized form of the bundle hash (81 values)."""
        if self.hash is None:
            raise ValueError("Bundle is not finalized")
        return signing.normalized_bundle(self.hash)

    def verify_hash(self) -> bool:
        """
        Check the shared hash against the entries it claims to cover.

        True only for a finalized bundle whose entries all carry the same
        hash, have consistent indexes, and whose essence hashes to it.
        """
        if self.hash is None:
            return False

        last_index = len(self.entries) - 1
        for i, entry in enumerate(self.entries):
            if entry.bundle_hash != self.hash:
                return False
            if entry.current_index != i or entry.last_index != last_index:
                return False

        try:
            return essence_hash(self.entries) == self.hash
        except ValueError:
            # Entry fields that are not trytes or overflow their trit width
            return False

    def with_signature_fragments(self, fragments: Mapping[int, str]) -> "Bundle":
        """
        Return a snapshot with signature fragments written at given indexes.

        Args:
            fragments: {entry_index: signature fragment trytes}
        """
        entries = list(self.entries)
        for index, fragment in fragments.items():
            entries[index] = replace(
                entries[index],
                signature_message_fragment=fragment,
                fragment_state=FragmentState.SIGNED,
            )
        return replace(self, entries=tuple(entries))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalized": self.finalized,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Bundle":
        if not isinstance(data, Mapping):
            raise ValidationError(f"Malformed bundle: {data!r}")
        return cls(
            entries=tuple(BundleEntry.from_dict(e) for e in data.get("entries", [])),
            finalized=bool(data.get("finalized", False)),
        )

