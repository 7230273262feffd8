"""Sheet layout and row codecs for the finance spreadsheet.

Every record kind owns one worksheet. Row 1 holds the header, data rows start
at row 2, and columns follow the header order below. Cells are written with
``RAW`` input semantics: numbers as numbers, booleans as the literal tokens
``YES``/``NO``, and absent optional values as empty strings.
"""
import dataclasses
import logging
import math
from typing import Any, Dict, List, Sequence, Type

from ..data import model
from ..status import status

DATA_START_ROW: int = 2

BOOL_TRUE: str = 'YES'
BOOL_FALSE: str = 'NO'


@dataclasses.dataclass(frozen=True)
class Column:
    """One spreadsheet column bound to a record field."""
    header: str
    field: str
    kind: str  # 'int', 'float', 'str' or 'bool'


def idx_to_col(idx: int) -> str:
    """Convert zero-based column index to spreadsheet letter(s).

    Args:
        idx: The zero-based column index.

    Returns:
        The spreadsheet column letter(s) (e.g., A, B, AA).
    """
    letters = ''
    while idx >= 0:
        letters = chr((idx % 26) + ord('A')) + letters
        idx = idx // 26 - 1
    return letters


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f'"{value}" is not an integer')
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f'"{value}" is not an integer')
        return int(value)
    return int(str(value).strip(), 10)


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f'"{value}" is not a number')
    v = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    if not math.isfinite(v):
        raise ValueError(f'"{value}" is not a finite number')
    return v


class SheetSchema:
    """Layout of one worksheet and the codec between its rows and records.

    Args:
        title: Worksheet title.
        collection: Name of the :class:`~FinanceTracker.data.model.Dataset` attribute.
        record_cls: Record dataclass stored in the sheet.
        columns: Ordered columns.
    """

    def __init__(self, title: str, collection: str, record_cls: Type[model.Record],
                 columns: Sequence[Column]) -> None:
        self.title = title
        self.collection = collection
        self.record_cls = record_cls
        self.columns: List[Column] = list(columns)

    def __repr__(self) -> str:
        return f'<SheetSchema {self.title} ({len(self.columns)} columns)>'

    @property
    def headers(self) -> List[str]:
        return [c.header for c in self.columns]

    @property
    def last_col(self) -> str:
        return idx_to_col(len(self.columns) - 1)

    @property
    def header_range(self) -> str:
        """The header row, e.g. ``Transactions!A1:G1``."""
        return f'{self.title}!A1:{self.last_col}1'

    @property
    def data_range(self) -> str:
        """All data rows below the header, e.g. ``Transactions!A2:G``."""
        return f'{self.title}!A{DATA_START_ROW}:{self.last_col}'

    def is_optional(self, column: Column) -> bool:
        return column.field in self.record_cls.optional_fields

    def encode(self, record: model.Record) -> List[Any]:
        """Return the ordered cell values for a record."""
        row: List[Any] = []
        for column in self.columns:
            value = getattr(record, column.field)
            if column.kind == 'bool':
                row.append(BOOL_TRUE if value else BOOL_FALSE)
            elif value is None:
                row.append('')
            else:
                row.append(value)
        return row

    def decode(self, row: Sequence[Any], row_number: int = 0) -> model.Record:
        """Build a record from a row of cell values.

        The Sheets API drops trailing empty cells, so short rows are padded.

        Args:
            row: Cell values in column order.
            row_number: 1-based sheet row, used in error messages.

        Returns:
            The decoded record.

        Raises:
            status.MalformedRowError: If the row is too wide or a numeric cell does not parse.
        """
        where = f'{self.title} row {row_number}' if row_number else self.title
        if len(row) > len(self.columns):
            raise status.MalformedRowError(
                f'{where}: expected at most {len(self.columns)} cells, got {len(row)}.'
            )
        cells = list(row) + [''] * (len(self.columns) - len(row))

        kwargs: Dict[str, Any] = {}
        for column, cell in zip(self.columns, cells):
            if column.kind == 'bool':
                kwargs[column.field] = cell == BOOL_TRUE
                continue

            if cell is None or cell == '':
                if self.is_optional(column) or column.kind == 'str':
                    kwargs[column.field] = None if self.is_optional(column) else ''
                    continue
                raise status.MalformedRowError(f'{where}: "{column.header}" is empty.')

            try:
                if column.kind == 'int':
                    kwargs[column.field] = _parse_int(cell)
                elif column.kind == 'float':
                    kwargs[column.field] = _parse_float(cell)
                else:
                    kwargs[column.field] = str(cell)
            except ValueError as ex:
                raise status.MalformedRowError(f'{where}: "{column.header}" {ex}.') from ex

        return self.record_cls(**kwargs)

    def decode_rows(self, rows: Sequence[Sequence[Any]]) -> List[model.Record]:
        """Decode every data row of the sheet, preserving order. Blank rows are skipped."""
        records = []
        for i, row in enumerate(rows):
            if all(cell is None or cell == '' for cell in row):
                logging.debug(f'Skipping blank row {i + DATA_START_ROW} in "{self.title}".')
                continue
            records.append(self.decode(row, row_number=i + DATA_START_ROW))
        logging.debug(f'Decoded {len(records)} row(s) from "{self.title}".')
        return records


SCHEMAS: List[SheetSchema] = [
    SheetSchema('Transactions', 'transactions', model.Transaction, [
        Column('ID', 'id', 'int'),
        Column('Type', 'type', 'str'),
        Column('Title', 'title', 'str'),
        Column('Amount', 'amount', 'float'),
        Column('Category', 'category', 'str'),
        Column('Date', 'date', 'str'),
        Column('Notes', 'notes', 'str'),
    ]),
    SheetSchema('Incomes', 'incomes', model.Income, [
        Column('ID', 'id', 'int'),
        Column('Title', 'title', 'str'),
        Column('Amount', 'amount', 'float'),
        Column('Currency', 'currency', 'str'),
        Column('Date', 'date', 'str'),
        Column('Recurring', 'recurring', 'bool'),
    ]),
    SheetSchema('Subscriptions', 'subscriptions', model.Subscription, [
        Column('ID', 'id', 'int'),
        Column('Name', 'name', 'str'),
        Column('Amount', 'amount', 'float'),
        Column('Billing Date', 'billing_date', 'str'),
        Column('Category', 'category', 'str'),
    ]),
    SheetSchema('Investments', 'investments', model.Investment, [
        Column('ID', 'id', 'int'),
        Column('Type', 'type', 'str'),
        Column('Name', 'name', 'str'),
        Column('Quantity', 'quantity', 'float'),
        Column('Purchase Price', 'purchase_price', 'float'),
        Column('Current Value', 'current_value', 'float'),
    ]),
    SheetSchema('Goals', 'goals', model.Goal, [
        Column('ID', 'id', 'int'),
        Column('Name', 'name', 'str'),
        Column('Target Amount', 'target_amount', 'float'),
        Column('Current Amount', 'current_amount', 'float'),
        Column('Deadline', 'deadline', 'str'),
        Column('Monthly Savings', 'monthly_savings', 'float'),
    ]),
    SheetSchema('Donations', 'donations', model.Donation, [
        Column('ID', 'id', 'int'),
        Column('Organization', 'organization', 'str'),
        Column('Amount', 'amount', 'float'),
        Column('Date', 'date', 'str'),
        Column('Recurring', 'recurring', 'bool'),
    ]),
]

SHEET_TITLES: List[str] = [s.title for s in SCHEMAS]


def get_schema(key: str) -> SheetSchema:
    """Look up a schema by worksheet title or dataset collection name.

    Raises:
        KeyError: If no schema matches.
    """
    for schema in SCHEMAS:
        if key in (schema.title, schema.collection):
            return schema
    raise KeyError(f'Unknown sheet: "{key}"')
