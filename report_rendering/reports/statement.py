"""
Statement report.

Parses account statement JSON into frozen pydantic models and derives the
opening/closing balance of every account plus statement-wide totals.

Wire format (camelCase)::

    {
      "startDate": "2024-01-01",
      "endDate": "2024-01-31",
      "accounts": [
        {
          "accountName": "Chequing",
          "transitNumber": "00012",
          "accountNumber": "1234567890",
          "accountType": "CHQ",
          "transactions": [
            {"actionDate": "2024-01-05", "valueDate": "2024-01-05",
             "transactionType": "DEP", "description": "Salary Deposit",
             "creditAmount": 100.00, "balance": 100.00}
          ]
        }
      ]
    }
"""

import json
import logging
import re
from datetime import date
from decimal import MAX_PREC, Decimal, localcontext
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..errors import MalformedInput
from ..handler import ReportEnvironment, process_report
from ..models import OutputFormat, ReportOutput
from ..renderer import render_report

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def require_iso_date(value):
    """Accept only yyyy-MM-dd strings; pydantic would otherwise read numbers as Unix time."""
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value):
        raise ValueError(f"expected a yyyy-MM-dd date, got {value!r}")
    return value


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class _StatementBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Transaction(_StatementBase):
    """One dated movement and the running balance after it."""
    action_date: date
    value_date: date
    transaction_type: Optional[str] = None
    description: Optional[str] = None
    credit_amount: Optional[Decimal] = None
    debit_amount: Optional[Decimal] = None
    balance: Decimal

    @field_validator("action_date", "value_date", mode="before")
    @classmethod
    def check_iso_date(cls, value):
        return require_iso_date(value)

    @model_validator(mode="after")
    def check_single_amount(self) -> "Transaction":
        if self.credit_amount is not None and self.debit_amount is not None:
            raise ValueError("a transaction carries either creditAmount or debitAmount, not both")
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Credit as positive, debit as negative, zero when neither is present."""
        if self.credit_amount is not None:
            return self.credit_amount
        if self.debit_amount is not None:
            return -self.debit_amount
        return ZERO


class Account(_StatementBase):
    account_name: Optional[str] = None
    transit_number: Optional[str] = None
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    opening_balance: Decimal = ZERO
    closing_balance: Decimal = ZERO
    transactions: Tuple[Transaction, ...] = ()


class StatementModel(_StatementBase):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    accounts: Tuple[Account, ...] = ()
    total_opening_balance: Decimal = ZERO
    total_closing_balance: Decimal = ZERO

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def check_iso_date(cls, value):
        return require_iso_date(value)


# =============================================================================
# BALANCE DERIVATION
# =============================================================================

def sort_transactions(transactions: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    """Order by action date, then value date; ties keep input order."""
    return tuple(sorted(transactions, key=lambda t: (t.action_date, t.value_date)))


def derive_account_balances(account: Account) -> Account:
    """
    Return a copy of the account with sorted transactions and derived balances.

    The first transaction's balance already includes its own amount, so the
    opening balance is that balance minus the signed amount. The closing
    balance is the running balance after the last transaction.
    """
    if not account.transactions:
        return account.model_copy(update={
            "opening_balance": ZERO,
            "closing_balance": ZERO,
        })

    ordered = sort_transactions(account.transactions)
    first, last = ordered[0], ordered[-1]

    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        opening_balance = first.balance - first.signed_amount

    derived = account.model_copy(update={
        "transactions": ordered,
        "opening_balance": opening_balance,
        "closing_balance": last.balance,
    })

    logger.debug(
        f"Calculated balances for account {derived.account_number}: "
        f"opening={derived.opening_balance}, closing={derived.closing_balance}"
    )
    return derived


def derive_statement(statement: StatementModel) -> StatementModel:
    """Derive per-account balances and the statement totals."""
    accounts = tuple(derive_account_balances(account) for account in statement.accounts)

    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        total_opening = sum((a.opening_balance for a in accounts), ZERO)
        total_closing = sum((a.closing_balance for a in accounts), ZERO)

    return statement.model_copy(update={
        "accounts": accounts,
        "total_opening_balance": total_opening,
        "total_closing_balance": total_closing,
    })


def parse_statement(raw: bytes) -> StatementModel:
    """
    Parse statement JSON and derive all computed balances.

    JSON numbers are decoded straight to Decimal so amounts never pass
    through float.

    Args:
        raw: UTF-8 encoded JSON document

    Returns:
        Fully derived, immutable StatementModel

    Raises:
        MalformedInput: If the bytes are not valid JSON or do not match the schema
    """
    logger.debug("Parsing statement data")

    try:
        data = json.loads(raw, parse_float=Decimal)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedInput(f"Statement data is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedInput("Statement data must be a JSON object")

    try:
        statement = StatementModel.model_validate(data)
    except ValidationError as e:
        raise MalformedInput(
            f"Statement data does not match the expected schema ({e.error_count()} errors)"
        ) from e

    statement = derive_statement(statement)
    logger.debug(f"Statement parsed successfully with {len(statement.accounts)} accounts")
    return statement


# =============================================================================
# REPORT HANDLER
# =============================================================================

class StatementReport:
    """Account statement report, registered as ``statement``."""

    name = "statement"

    def __init__(self, environment: ReportEnvironment):
        self.environment = environment

    def parse(self, raw: bytes) -> StatementModel:
        return parse_statement(raw)

    def render(
        self,
        model: StatementModel,
        template_name: str,
        output_format: OutputFormat,
        labels: Dict[str, str]
    ) -> ReportOutput:
        return render_report(model, template_name, output_format, labels, self.environment)

    def process(
        self,
        raw: bytes,
        template_name: str,
        output_format: OutputFormat,
        language: str
    ) -> ReportOutput:
        return process_report(
            self, raw, template_name, output_format, language, self.environment.labels
        )
