"""Data views over a finance dataset.

This module turns a :class:`~FinanceTracker.data.model.Dataset` into pandas
DataFrames laid out like the spreadsheet, and provides the summaries the
tracker shows next to its sync controls.
"""
import logging
from typing import Mapping

import pandas as pd

from ..core import schema
from .model import Dataset, TransactionType

SUMMARY_COLUMNS = ['category', 'total', 'transactions']
UNCATEGORIZED = 'Uncategorized'


def get_frame(dataset: Dataset, kind: str) -> pd.DataFrame:
    """Return one collection as a DataFrame with the sheet's headers as columns.

    Args:
        dataset: The dataset to read.
        kind: Worksheet title or collection name, e.g. ``'Incomes'`` or ``'incomes'``.

    Returns:
        pd.DataFrame: One row per record, columns in sheet order.

    Raises:
        KeyError: If kind does not name a sheet.
    """
    sheet = schema.get_schema(kind)
    rows = [sheet.encode(r) for r in getattr(dataset, sheet.collection)]
    df = pd.DataFrame(rows, columns=sheet.headers)
    for column in sheet.columns:
        if column.kind in ('int', 'float'):
            df[column.header] = pd.to_numeric(df[column.header], errors='coerce')
    return df


def get_category_summary(dataset: Dataset, type_: str = TransactionType.Expense.value) -> pd.DataFrame:
    """Group transactions of one type by category.

    Args:
        dataset: The dataset to summarise.
        type_: Transaction type to include.

    Returns:
        pd.DataFrame: Columns ``category``, ``total`` and ``transactions`` (the number of
            transactions), sorted by total in descending order.
    """
    records = [t for t in dataset.transactions if t.type == type_]
    if not records:
        logging.debug(f'No "{type_}" transactions to summarise.')
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df = pd.DataFrame({
        'category': [t.category or UNCATEGORIZED for t in records],
        'amount': [t.amount for t in records],
    })
    df = (
        df.groupby('category')
        .agg(total=('amount', 'sum'), transactions=('amount', 'size'))
        .reset_index()
        .sort_values(by='total', ascending=False)
        .reset_index(drop=True)
    )
    return df[SUMMARY_COLUMNS]


def get_income_total(dataset: Dataset, rates: Mapping[str, float]) -> float:
    """Sum every income in EUR.

    Args:
        dataset: The dataset to read.
        rates: EUR-based exchange rates, as returned by
            :func:`~FinanceTracker.core.rates.fetch_exchange_rates`.

    Returns:
        float: The total in EUR.

    Raises:
        ValueError: If an income uses a currency missing from rates.
    """
    total = 0.0
    for income in dataset.incomes:
        rate = rates.get(income.currency)
        if not rate:
            raise ValueError(f'No exchange rate for "{income.currency}"')
        total += income.amount / rate
    return total
