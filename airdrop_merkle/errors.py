"""Exception taxonomy shared by the core and the CLI.

Every error carries the exit code the CLI reports for it, so the mapping
lives next to the error rather than in a lookup table.
"""

EXIT_OK = 0
EXIT_PROOF_INVALID = 1
# 2 is left to argparse for usage errors
EXIT_FILE_ERROR = 3
EXIT_MALFORMED_INPUT = 4
EXIT_NOT_FOUND = 5


class MerkleError(Exception):
    """Base class for all airdrop-merkle errors."""

    exit_code = EXIT_MALFORMED_INPUT


class EncodingError(MerkleError):
    """A record cannot be turned into a leaf (bad address or amount)."""


class EmptyTreeError(MerkleError):
    """A tree was requested over zero leaves."""


class MalformedProofError(MerkleError):
    """A proof step has a bad side flag or a digest of the wrong length."""


class ParseError(MerkleError):
    """The allocation file does not have the expected structure."""


class NotFoundError(MerkleError):
    """The queried address and amount are not in the allocation list."""

    exit_code = EXIT_NOT_FOUND


class FileReadError(MerkleError):
    """The allocation file could not be read (or an output file written)."""

    exit_code = EXIT_FILE_ERROR
