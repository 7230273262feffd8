"""Record types mirrored between the finance tracker and the spreadsheet.

Each record is a flat dataclass stored as one spreadsheet row. The
:class:`Dataset` aggregates the six collections in insertion order.

The tracker itself stores records as camelCase JSON objects (``billingDate``,
``purchasePrice``...); :meth:`Dataset.from_dict` and :meth:`Dataset.to_dict`
convert between the two shapes.
"""
import dataclasses
import enum
from typing import Any, Dict, List, Optional, Type


class TransactionType(enum.StrEnum):
    """Known transaction types. Other values are stored as-is."""
    Income = 'income'
    Expense = 'expense'


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


class Record:
    """Mixin providing dict conversion and optional-field normalisation."""

    #: Names of fields that may be absent
    optional_fields: tuple = ()

    def __post_init__(self) -> None:
        # An empty string and a missing value are the same thing in a sheet cell
        for name in self.optional_fields:
            if getattr(self, name) == '':
                object.__setattr__(self, name, None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Record':
        """Create a record from a camelCase or snake_case mapping.

        Args:
            data: Mapping with one key per field. Unknown keys are ignored.

        Returns:
            The record instance.

        Raises:
            KeyError: If a required field is missing.
        """
        kwargs = {}
        for field in dataclasses.fields(cls):
            for key in (_camel(field.name), field.name):
                if key in data:
                    kwargs[field.name] = data[key]
                    break
            else:
                if field.name not in cls.optional_fields and field.default is dataclasses.MISSING:
                    raise KeyError(f'{cls.__name__} is missing required field "{_camel(field.name)}"')
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as a camelCase mapping, omitting absent optional fields."""
        out = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is None and field.name in self.optional_fields:
                continue
            out[_camel(field.name)] = value
        return out


@dataclasses.dataclass
class Transaction(Record):
    id: int
    type: str
    title: str
    amount: float
    date: str
    category: Optional[str] = None
    notes: Optional[str] = None

    optional_fields = ('category', 'notes')


@dataclasses.dataclass
class Income(Record):
    id: int
    title: str
    amount: float
    currency: str
    date: str
    recurring: bool = False


@dataclasses.dataclass
class Subscription(Record):
    id: int
    name: str
    amount: float
    billing_date: str
    category: Optional[str] = None

    optional_fields = ('category',)


@dataclasses.dataclass
class Investment(Record):
    id: int
    type: str
    name: str
    quantity: float
    purchase_price: float
    current_value: Optional[float] = None

    optional_fields = ('current_value',)


@dataclasses.dataclass
class Goal(Record):
    id: int
    name: str
    target_amount: float
    current_amount: float
    deadline: Optional[str] = None
    monthly_savings: Optional[float] = None

    optional_fields = ('deadline', 'monthly_savings')


@dataclasses.dataclass
class Donation(Record):
    id: int
    organization: str
    amount: float
    date: str
    recurring: bool = False


#: Dataset attribute name -> record type, in sheet order
COLLECTIONS: Dict[str, Type[Record]] = {
    'transactions': Transaction,
    'incomes': Income,
    'subscriptions': Subscription,
    'investments': Investment,
    'goals': Goal,
    'donations': Donation,
}


@dataclasses.dataclass
class Dataset:
    """All six record collections of the finance tracker."""
    transactions: List[Transaction] = dataclasses.field(default_factory=list)
    incomes: List[Income] = dataclasses.field(default_factory=list)
    subscriptions: List[Subscription] = dataclasses.field(default_factory=list)
    investments: List[Investment] = dataclasses.field(default_factory=list)
    goals: List[Goal] = dataclasses.field(default_factory=list)
    donations: List[Donation] = dataclasses.field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in COLLECTIONS)

    @classmethod
    def from_dict(cls, data: Dict[str, List[Dict[str, Any]]]) -> 'Dataset':
        """Build a dataset from the tracker's JSON shape. Missing collections are empty."""
        return cls(**{
            name: [record_cls.from_dict(item) for item in data.get(name) or []]
            for name, record_cls in COLLECTIONS.items()
        })

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: [record.to_dict() for record in getattr(self, name)] for name in COLLECTIONS}
