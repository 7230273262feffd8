"""Unit tests for FinanceTracker.core.schema (sheet layout and row codecs).

Run:
    python -m unittest tests.test_schema
"""
import math
import unittest

from FinanceTracker.core import schema
from FinanceTracker.data.model import Donation, Goal, Income, Investment, Subscription, Transaction
from FinanceTracker.status import status


class LayoutTests(unittest.TestCase):

    def test_sheet_order(self):
        self.assertEqual(
            schema.SHEET_TITLES,
            ['Transactions', 'Incomes', 'Subscriptions', 'Investments', 'Goals', 'Donations']
        )

    def test_headers(self):
        expected = {
            'Transactions': ['ID', 'Type', 'Title', 'Amount', 'Category', 'Date', 'Notes'],
            'Incomes': ['ID', 'Title', 'Amount', 'Currency', 'Date', 'Recurring'],
            'Subscriptions': ['ID', 'Name', 'Amount', 'Billing Date', 'Category'],
            'Investments': ['ID', 'Type', 'Name', 'Quantity', 'Purchase Price', 'Current Value'],
            'Goals': ['ID', 'Name', 'Target Amount', 'Current Amount', 'Deadline', 'Monthly Savings'],
            'Donations': ['ID', 'Organization', 'Amount', 'Date', 'Recurring'],
        }
        self.assertEqual({s.title: s.headers for s in schema.SCHEMAS}, expected)

    def test_ranges(self):
        self.assertEqual(schema.get_schema('Transactions').header_range, 'Transactions!A1:G1')
        self.assertEqual(schema.get_schema('Transactions').data_range, 'Transactions!A2:G')
        self.assertEqual(schema.get_schema('subscriptions').data_range, 'Subscriptions!A2:E')
        self.assertEqual(schema.get_schema('goals').header_range, 'Goals!A1:F1')

    def test_idx_to_col(self):
        self.assertEqual(schema.idx_to_col(0), 'A')
        self.assertEqual(schema.idx_to_col(25), 'Z')
        self.assertEqual(schema.idx_to_col(26), 'AA')
        self.assertEqual(schema.idx_to_col(27), 'AB')

    def test_unknown_schema(self):
        with self.assertRaises(KeyError):
            schema.get_schema('Budgets')


class EncodeTests(unittest.TestCase):

    def test_transaction(self):
        t = Transaction(id=1, type='expense', title='Coffee', amount=3.5, date='2024-01-01',
                        category='Food', notes='')
        self.assertEqual(
            schema.get_schema('transactions').encode(t),
            [1, 'expense', 'Coffee', 3.5, 'Food', '2024-01-01', '']
        )

    def test_booleans(self):
        s = schema.get_schema('incomes')
        self.assertEqual(s.encode(Income(1, 'Salary', 10.0, 'EUR', '2024-01-01', True))[-1], 'YES')
        self.assertEqual(s.encode(Income(2, 'Gift', 10.0, 'EUR', '2024-01-01', False))[-1], 'NO')

    def test_absent_optionals(self):
        self.assertEqual(
            schema.get_schema('subscriptions').encode(Subscription(3, 'Cloud', 2.99, '2024-01-10')),
            [3, 'Cloud', 2.99, '2024-01-10', '']
        )
        self.assertEqual(
            schema.get_schema('goals').encode(Goal(1, 'Car', 8000.0, 0.0)),
            [1, 'Car', 8000.0, 0.0, '', '']
        )


class DecodeTests(unittest.TestCase):

    def test_exact_yes_only(self):
        s = schema.get_schema('donations')
        for cell, expected in (('YES', True), ('NO', False), ('yes', False), ('Yes', False),
                               ('TRUE', False), ('', False), (True, False)):
            with self.subTest(cell=cell):
                self.assertIs(s.decode([1, 'Org', 5, '2024-01-01', cell]).recurring, expected)

    def test_short_row_is_padded(self):
        t = schema.get_schema('transactions').decode([4, 'expense', 'Bus', 2.2, 'Travel', '2024-02-02'])
        self.assertIsNone(t.notes)
        self.assertEqual(t.category, 'Travel')

    def test_empty_optional_becomes_none(self):
        inv = schema.get_schema('investments').decode([1, 'stock', 'ACME', 3, 12.5, ''])
        self.assertEqual(inv, Investment(1, 'stock', 'ACME', 3.0, 12.5, None))

    def test_string_numbers(self):
        g = schema.get_schema('goals').decode(['2', 'Bike', '500', '125.5', '2024-09-01', '50'])
        self.assertEqual(g, Goal(2, 'Bike', 500.0, 125.5, '2024-09-01', 50.0))

    def test_integral_float_id(self):
        t = schema.get_schema('transactions').decode([7.0, 'expense', 'Tea', 1, '', '2024-01-01'])
        self.assertEqual(t.id, 7)
        self.assertIsInstance(t.amount, float)

    def test_numeric_text_stays_text(self):
        d = schema.get_schema('donations').decode([1, 2024, 5, 20240101, 'NO'])
        self.assertEqual(d.organization, '2024')
        self.assertEqual(d.date, '20240101')

    def test_empty_required_string(self):
        d = schema.get_schema('donations').decode([1, '', 5, '2024-01-01', 'NO'])
        self.assertEqual(d, Donation(1, '', 5.0, '2024-01-01', False))

    def test_malformed_rows(self):
        s = schema.get_schema('transactions')
        bad_rows = [
            ['x', 'expense', 'Coffee', 3.5, 'Food', '2024-01-01', ''],
            [1.5, 'expense', 'Coffee', 3.5, 'Food', '2024-01-01', ''],
            [1, 'expense', 'Coffee', 'three', 'Food', '2024-01-01', ''],
            [1, 'expense', 'Coffee', '', 'Food', '2024-01-01', ''],
            [1, 'expense', 'Coffee', 'nan', 'Food', '2024-01-01', ''],
            [True, 'expense', 'Coffee', 3.5, 'Food', '2024-01-01', ''],
            [1, 'expense', 'Coffee', 3.5, 'Food', '2024-01-01', '', 'extra'],
        ]
        for row in bad_rows:
            with self.subTest(row=row):
                with self.assertRaises(status.MalformedRowError):
                    s.decode(row, row_number=5)

    def test_error_names_row_and_column(self):
        with self.assertRaises(status.MalformedRowError) as cm:
            schema.get_schema('incomes').decode([1, 'Salary', 'abc', 'EUR', '2024-01-01'], row_number=3)
        self.assertIn('Incomes row 3', str(cm.exception))
        self.assertIn('Amount', str(cm.exception))

    def test_decode_rows_skips_blank(self):
        rows = [
            [1, 'Salary', 10, 'EUR', '2024-01-01', 'YES'],
            [],
            ['', '', ''],
            [2, 'Gift', 5, 'USD', '2024-01-02'],
        ]
        incomes = schema.get_schema('incomes').decode_rows(rows)
        self.assertEqual([i.id for i in incomes], [1, 2])
        self.assertEqual([i.recurring for i in incomes], [True, False])

    def test_round_trip_every_sheet(self):
        records = {
            'transactions': Transaction(1, 'income', 'Pay', 100.0, '2024-01-01', 'Work', 'March'),
            'incomes': Income(1, 'Pay', 100.0, 'PKR', '2024-01-01', True),
            'subscriptions': Subscription(1, 'Video', 12.0, '2024-01-15', 'Fun'),
            'investments': Investment(1, 'gold', 'Coins', 2.0, 58.0, 61.5),
            'goals': Goal(1, 'House', 50000.0, 1200.0, '2030-01-01', 400.0),
            'donations': Donation(1, 'Shelter', 15.0, '2024-01-20', False),
        }
        for collection, record in records.items():
            with self.subTest(collection=collection):
                s = schema.get_schema(collection)
                self.assertEqual(s.decode(s.encode(record)), record)

    def test_finite_floats_only(self):
        with self.assertRaises(ValueError):
            schema._parse_float(math.inf)
        self.assertEqual(schema._parse_float(' 2.5 '), 2.5)
