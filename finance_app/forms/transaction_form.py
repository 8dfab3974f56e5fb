"""
Transaction Form Controller

Holds the state of the create/edit transaction form independently of any
UI toolkit: default values, field updates, receipt pre-fill, validation
against TransactionInput, and submit to the create or update action.

FLOW:
1. Build with accounts, categories and the two backend actions
2. UI writes fields with set_value() and reads values / errors
3. submit() validates; on errors nothing reaches the backend
4. On a successful action the form resets and yields the account page path
"""

from datetime import date, datetime
from typing import Any, Awaitable, Callable, Optional, Union

import structlog
from pydantic import BaseModel, Field, ValidationError

from finance_app.models.email import describe_error
from finance_app.models.transaction import (
    Account,
    ActionResult,
    Category,
    ScannedReceipt,
    Transaction,
    TransactionInput,
    TransactionType,
)


CreateTransactionFn = Callable[[TransactionInput], Awaitable[Any]]
UpdateTransactionFn = Callable[[str, TransactionInput], Awaitable[Any]]

FORM_FIELDS = (
    "type",
    "amount",
    "description",
    "account_id",
    "category",
    "date",
    "is_recurring",
    "recurring_interval",
)


class SubmitOutcome(BaseModel):
    """What the UI needs after a submit attempt."""

    success: bool
    redirect_to: Optional[str] = None
    errors: dict[str, str] = Field(default_factory=dict)
    result: Optional[ActionResult] = None
    error: Optional[str] = None


def _as_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return date.fromisoformat(value)
    return value


def _field_errors(exc: ValidationError) -> dict[str, str]:
    """First message per field, without pydantic's "Value error, " prefix."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "form"
        if field in errors:
            continue
        cause = err.get("ctx", {}).get("error")
        errors[field] = str(cause) if cause is not None else err["msg"]
    return errors


def format_date(value: Optional[date]) -> str:
    """Long date, e.g. "October 19th, 2026"; "Pick a date" when unset."""
    if value is None:
        return "Pick a date"
    day = value.day
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{value.strftime('%B')} {day}{suffix}, {value.year}"


def account_label(account: Account, currency_symbol: str = "$") -> str:
    return f"{account.name} ({currency_symbol}{account.balance:.2f})"


class TransactionFormController:
    """
    Create/edit transaction form.

    In edit mode the form starts from the existing transaction and submits
    to update_transaction(edit_id, data); otherwise it starts from defaults
    and submits to create_transaction(data).
    """

    def __init__(
        self,
        accounts: list[Account],
        categories: list[Category],
        create_transaction: CreateTransactionFn,
        update_transaction: UpdateTransactionFn,
        edit_mode: bool = False,
        initial_data: Optional[Union[Transaction, dict[str, Any]]] = None,
        edit_id: Optional[str] = None,
        logger=None,
    ):
        self._accounts = list(accounts)
        self._categories = list(categories)
        self._create = create_transaction
        self._update = update_transaction
        self._edit_mode = edit_mode
        self._logger = logger or structlog.get_logger("transaction_form")

        if isinstance(initial_data, BaseModel):
            initial_data = initial_data.model_dump()
        self._initial_data = initial_data

        if edit_mode and edit_id is None and initial_data:
            edit_id = initial_data.get("id")
        if edit_mode and not edit_id:
            raise ValueError("edit_id is required in edit mode")
        self._edit_id = edit_id

        self._values = self.default_values()
        self.errors: dict[str, str] = {}
        self.loading = False
        self.last_result: Optional[ActionResult] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @property
    def edit_id(self) -> Optional[str]:
        return self._edit_id

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def default_values(self) -> dict[str, Any]:
        """Starting values: the transaction being edited, or blank defaults."""
        if self._edit_mode and self._initial_data:
            initial = self._initial_data
            values = {
                "type": TransactionType(initial["type"]),
                "amount": str(initial["amount"]),
                "description": initial.get("description") or "",
                "account_id": initial["account_id"],
                "category": initial.get("category"),
                "date": _as_date(initial["date"]),
                "is_recurring": bool(initial.get("is_recurring", False)),
            }
            if initial.get("recurring_interval"):
                values["recurring_interval"] = initial["recurring_interval"]
            return values

        default_account = next((a for a in self._accounts if a.is_default), None)
        return {
            "type": TransactionType.EXPENSE,
            "amount": "",
            "description": "",
            "account_id": default_account.id if default_account else "",
            "date": date.today(),
            "is_recurring": False,
        }

    def set_value(self, field: str, value: Any) -> None:
        if field not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {field}")
        if field == "type":
            value = TransactionType(value)
        self._values[field] = value

    def reset(self) -> None:
        self._values = self.default_values()
        self.errors = {}

    # -------------------------------------------------------------------------
    # Derived view state
    # -------------------------------------------------------------------------

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType(self._values["type"])

    def filtered_categories(self) -> list[Category]:
        """Categories matching the selected transaction type."""
        current = self.transaction_type
        return [c for c in self._categories if c.type == current]

    @property
    def show_recurring_interval(self) -> bool:
        return bool(self._values.get("is_recurring"))

    @property
    def can_scan_receipt(self) -> bool:
        return not self._edit_mode

    @property
    def submit_label(self) -> str:
        if self.loading:
            return "Saving..."
        return "Update Transaction" if self._edit_mode else "Create Transaction"

    @property
    def date_label(self) -> str:
        return format_date(self._values.get("date"))

    # -------------------------------------------------------------------------
    # Receipt scanner callback
    # -------------------------------------------------------------------------

    def apply_scan(
        self,
        scanned: Optional[Union[ScannedReceipt, dict[str, Any]]],
    ) -> list[str]:
        """
        Pre-fill the form from a completed receipt scan.

        Amount and date are always applied; description and category only
        when the scanner found them. Returns the names of fields written.
        """
        if not scanned:
            return []
        if not isinstance(scanned, ScannedReceipt):
            scanned = ScannedReceipt.model_validate(scanned)

        self._values["amount"] = str(scanned.amount)
        self._values["date"] = scanned.date
        applied = ["amount", "date"]

        if scanned.description:
            self._values["description"] = scanned.description
            applied.append("description")
        if scanned.category:
            self._values["category"] = scanned.category
            applied.append("category")

        self._logger.info("receipt_scan_applied", fields=applied)
        return applied

    # -------------------------------------------------------------------------
    # Submit
    # -------------------------------------------------------------------------

    def validate(self) -> Optional[TransactionInput]:
        """Check current values; fills self.errors and returns None on failure."""
        payload = {field: self._values.get(field) for field in FORM_FIELDS}
        try:
            validated = TransactionInput.model_validate(payload)
        except ValidationError as e:
            self.errors = _field_errors(e)
            return None
        self.errors = {}
        return validated

    async def submit(self) -> SubmitOutcome:
        validated = self.validate()
        if validated is None:
            return SubmitOutcome(success=False, errors=dict(self.errors))

        self.loading = True
        try:
            if self._edit_mode:
                raw = await self._update(self._edit_id, validated)
            else:
                raw = await self._create(validated)
            result = raw if isinstance(raw, ActionResult) else ActionResult.model_validate(raw)
        except Exception as e:
            error = describe_error(e)
            self._logger.error(
                "transaction_submit_failed",
                edit_mode=self._edit_mode,
                error=error,
            )
            return SubmitOutcome(success=False, error=error)
        finally:
            self.loading = False

        self.last_result = result
        if result.success and result.account_id:
            self.reset()
            return SubmitOutcome(
                success=True,
                redirect_to=f"/account/{result.account_id}",
                result=result,
            )

        error = result.error or "Transaction could not be saved"
        if result.success:
            error = "Saved transaction has no account_id to redirect to"
            self._logger.warning("transaction_submit_without_account", edit_mode=self._edit_mode)
        return SubmitOutcome(success=False, result=result, error=error)
