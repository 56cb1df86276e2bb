"""Read airdrop allocation lists from JSON or CSV files."""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, List, NamedTuple, Sequence, Union

from airdrop_merkle.encoding import parse_amount
from airdrop_merkle.errors import EncodingError, FileReadError, NotFoundError, ParseError

logger = logging.getLogger(__name__)


class Record(NamedTuple):
    address: str
    amount: int


def _make_record(index: int, address: Any, amount: Any) -> Record:
    if not isinstance(address, str):
        raise ParseError(f"Entry {index}: 'address' must be a string")
    if isinstance(amount, bool) or not isinstance(amount, (str, int)):
        raise ParseError(f"Entry {index}: 'amount' must be a decimal string")
    try:
        return Record(address, parse_amount(amount))
    except EncodingError as exc:
        raise EncodingError(f'Entry {index}: {exc}') from exc


def _read_json(text: str) -> List[Record]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ParseError(f'Invalid JSON: {exc}') from exc
    if not isinstance(data, list):
        raise ParseError('Allocation file must contain a JSON array')

    records = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ParseError(f"Entry {i}: expected an object with 'address' and 'amount'")
        try:
            records.append(_make_record(i, entry['address'], entry['amount']))
        except KeyError as exc:
            raise ParseError(f'Entry {i}: missing required key {exc}') from exc
    return records


def _read_csv(text: str) -> List[Record]:
    """Rows need an 'address' column and either 'amount' or 'allocation'."""
    records = []
    try:
        reader = csv.DictReader(io.StringIO(text))
        for i, row in enumerate(reader):
            address = row.get('address')
            amount = row.get('amount') or row.get('allocation')
            if address is None or amount is None:
                raise ParseError(f"Row {i}: missing required column 'address' or 'amount'")
            records.append(_make_record(i, address.strip(), amount))
    except csv.Error as exc:
        raise ParseError(f'Invalid CSV: {exc}') from exc
    return records


def read_records(text: str, fmt: str = 'json') -> List[Record]:
    """
    Parse allocation records from already-read file content.

    Args:
        text: File content
        fmt: "json" or "csv"

    Returns:
        Records in file order
    """
    if fmt == 'json':
        return _read_json(text)
    if fmt == 'csv':
        return _read_csv(text)
    raise ValueError(f'Unsupported allocation format {fmt!r}')


def load_records(path: Union[str, Path]) -> List[Record]:
    """Load records from *path*; files ending in .csv are read as CSV, anything else as JSON."""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8-sig')
    except FileNotFoundError as exc:
        raise FileReadError(f"File '{path}' not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(f"Cannot read '{path}': {exc}") from exc

    fmt = 'csv' if path.suffix.lower() == '.csv' else 'json'
    records = read_records(text, fmt)
    logger.debug('Loaded %d entries from %s', len(records), path)
    return records


def find_record(records: Sequence[Record], address: str, amount: Union[int, str]) -> int:
    """Return the index of the first record matching *address* and *amount*."""
    wanted = Record(address, parse_amount(amount))
    for i, record in enumerate(records):
        if record == wanted:
            return i
    raise NotFoundError(f'No allocation of {wanted.amount} for address {address}')
