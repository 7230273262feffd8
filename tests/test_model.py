"""Unit tests for FinanceTracker.data.model.

Run:
    python -m unittest tests.test_model
"""
import unittest

from FinanceTracker.data.model import COLLECTIONS, Dataset, Goal, Income, Investment, Subscription, Transaction


class RecordTests(unittest.TestCase):

    def test_empty_optional_is_none(self):
        t = Transaction(id=1, type='expense', title='Coffee', amount=3.5, date='2024-01-01',
                        category='', notes='')
        self.assertIsNone(t.category)
        self.assertIsNone(t.notes)

    def test_from_camel_case(self):
        sub = Subscription.from_dict({'id': 4, 'name': 'Gym', 'amount': 30, 'billingDate': '2024-02-01'})
        self.assertEqual(sub, Subscription(4, 'Gym', 30, '2024-02-01', None))

    def test_from_snake_case(self):
        inv = Investment.from_dict({
            'id': 1, 'type': 'crypto', 'name': 'ETH', 'quantity': 1,
            'purchase_price': 2000, 'current_value': 3300,
        })
        self.assertEqual(inv.purchase_price, 2000)
        self.assertEqual(inv.current_value, 3300)

    def test_from_dict_missing_required(self):
        with self.assertRaises(KeyError):
            Goal.from_dict({'id': 1, 'name': 'Car', 'targetAmount': 100})

    def test_from_dict_default_recurring(self):
        income = Income.from_dict({'id': 1, 'title': 'Pay', 'amount': 1, 'currency': 'EUR', 'date': '2024-01-01'})
        self.assertFalse(income.recurring)

    def test_to_dict_omits_absent_optionals(self):
        goal = Goal(1, 'Car', 8000.0, 100.0, monthly_savings=250.0)
        self.assertEqual(goal.to_dict(), {
            'id': 1, 'name': 'Car', 'targetAmount': 8000.0,
            'currentAmount': 100.0, 'monthlySavings': 250.0,
        })

    def test_to_dict_keeps_false_booleans(self):
        income = Income(1, 'Pay', 1.0, 'EUR', '2024-01-01')
        self.assertIs(income.to_dict()['recurring'], False)


class DatasetTests(unittest.TestCase):

    def test_collections_order(self):
        self.assertEqual(
            list(COLLECTIONS),
            ['transactions', 'incomes', 'subscriptions', 'investments', 'goals', 'donations']
        )

    def test_is_empty(self):
        self.assertTrue(Dataset().is_empty())
        self.assertFalse(Dataset(goals=[Goal(1, 'Car', 1.0, 0.0)]).is_empty())

    def test_from_dict_missing_collections(self):
        dataset = Dataset.from_dict({
            'transactions': [{'id': 1, 'type': 'expense', 'title': 'Coffee', 'amount': 3.5,
                              'category': 'Food', 'date': '2024-01-01', 'notes': ''}],
        })
        self.assertEqual(len(dataset.transactions), 1)
        self.assertEqual(dataset.incomes, [])
        self.assertIsNone(dataset.transactions[0].notes)

    def test_to_dict(self):
        dataset = Dataset(incomes=[Income(1, 'Pay', 10.0, 'USD', '2024-01-01', True)])
        data = dataset.to_dict()
        self.assertEqual(set(data), set(COLLECTIONS))
        self.assertEqual(data['incomes'], [{
            'id': 1, 'title': 'Pay', 'amount': 10.0, 'currency': 'USD',
            'date': '2024-01-01', 'recurring': True,
        }])
        self.assertEqual(Dataset.from_dict(data), dataset)
