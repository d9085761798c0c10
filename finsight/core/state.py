"""
Application state and reducer.

AppState holds one user's collections together with the dashboard's view
settings. State is never modified in place: `reduce` returns a new AppState
for every accepted action and the very same object for rejected ones, so a
caller can tell what changed by identity.

Actions are dicts with a "type" key:

    {"type": "add_transaction", "payload": {...}}
    {"type": "update_debt", "id": "abc123xyz", "payload": {...}}
    {"type": "delete_investment", "id": "abc123xyz"}
    {"type": "set_view", "view": "yearly"}
    {"type": "set_tab", "tab": "debts"}
    {"type": "select_period", "date": "2026-02-03", "month": "2026-02", "year": "2026"}
    {"type": "replace_all", "transactions": [...], "investments": [...], "debts": [...]}
    {"type": "clear_all"}

Add/update payloads that miss a required field or carry an invalid value
are ignored, as are updates and deletes of unknown ids.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from finsight.core.constants import EView, EDocument, ETab
from finsight.core.models import Transaction, Investment, Debt, generate_id
from finsight.utils.date_utils import today_iso, month_key, year_key, is_iso_date
from finsight.utils.error_utils import FinsightError

logger = logging.getLogger(__name__)

RECORD_CLASSES = {
    EDocument.TRANSACTIONS: Transaction,
    EDocument.INVESTMENTS: Investment,
    EDocument.DEBTS: Debt,
}

_COLLECTION_ACTIONS = {
    "transaction": EDocument.TRANSACTIONS,
    "investment": EDocument.INVESTMENTS,
    "debt": EDocument.DEBTS,
}


class AppState:
    """
    One user's in-memory finance state.

    Attributes:
        transactions, investments, debts: Record tuples in insertion order
        view: Dashboard period granularity
        active_tab: Last opened tab
        selected_date, selected_month, selected_year: Period references
    """

    __slots__ = (
        "transactions",
        "investments",
        "debts",
        "view",
        "active_tab",
        "selected_date",
        "selected_month",
        "selected_year",
    )

    def __init__(
        self,
        transactions=(),
        investments=(),
        debts=(),
        view: str = EView.MONTHLY.value,
        active_tab: str = ETab.DASHBOARD,
        selected_date: Optional[str] = None,
        selected_month: Optional[str] = None,
        selected_year: Optional[str] = None,
        today: Optional[date] = None,
    ):
        current_day = today_iso(today)
        self.transactions: Tuple[Transaction, ...] = tuple(transactions)
        self.investments: Tuple[Investment, ...] = tuple(investments)
        self.debts: Tuple[Debt, ...] = tuple(debts)
        self.view = view
        self.active_tab = active_tab
        self.selected_date = selected_date or current_day
        self.selected_month = selected_month or month_key(current_day)
        self.selected_year = selected_year or year_key(current_day)

    def replace(self, **changes) -> "AppState":
        """Copy of this state with some attributes changed."""
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return AppState(**values)

    def collection(self, document: str) -> tuple:
        return getattr(self, document)

    @property
    def reference(self) -> str:
        """Period reference matching the current view."""
        if self.view == EView.DAILY.value:
            return self.selected_date
        if self.view == EView.YEARLY.value:
            return self.selected_year
        return self.selected_month

    def settings(self) -> Dict[str, Any]:
        """Persisted UI settings."""
        return {"view": self.view, "activeTab": self.active_tab}

    def export(self) -> Dict[str, List[Dict[str, Any]]]:
        """Collections in backup-file form."""
        return {
            document: [record.to_dict() for record in self.collection(document)]
            for document in RECORD_CLASSES
        }

    def find(self, document: str, record_id: str):
        for record in self.collection(document):
            if record.id == record_id:
                return record
        return None

    def __repr__(self):
        return (
            f"<AppState(transactions={len(self.transactions)}, investments={len(self.investments)}, "
            f"debts={len(self.debts)}, view='{self.view}', tab='{self.active_tab}')>"
        )


def records_from_dicts(document: str, items: Optional[List[Dict[str, Any]]]) -> tuple:
    """
    Build records for a collection from stored dictionaries.

    Raises:
        FinsightError: If any item is not a valid record or ids repeat
    """
    record_class = RECORD_CLASSES[document]
    records = []
    for item in items or []:
        if not isinstance(item, dict):
            raise FinsightError(f"{document} entries must be objects, got {type(item).__name__}")
        records.append(record_class.from_dict(item))

    ids = [record.id for record in records]
    if len(set(ids)) != len(ids):
        raise FinsightError(f"{document} contains duplicate ids")
    return tuple(records)


def changed_documents(before: AppState, after: AppState) -> List[str]:
    """Documents whose content differs between two states, by identity."""
    if before is after:
        return []
    changed = [doc for doc in RECORD_CLASSES if before.collection(doc) is not after.collection(doc)]
    if before.settings() != after.settings():
        changed.append(EDocument.SETTINGS)
    return changed


def reduce(state: AppState, action: Dict[str, Any]) -> AppState:
    """
    Apply one action to a state.

    Returns:
        A new AppState, or `state` itself when the action is rejected
    """
    action_type = action.get("type", "")

    verb, _, noun = action_type.partition("_")
    if noun in _COLLECTION_ACTIONS:
        document = _COLLECTION_ACTIONS[noun]
        if verb == "add":
            return _add_record(state, document, action.get("payload") or {})
        if verb == "update":
            return _update_record(state, document, action.get("id"), action.get("payload") or {})
        if verb == "delete":
            return _delete_record(state, document, action.get("id"))

    if action_type == "set_view":
        try:
            view = EView(action.get("view")).value
        except ValueError:
            logger.debug(f"Ignoring unknown view {action.get('view')!r}")
            return state
        return state if view == state.view else state.replace(view=view)

    if action_type == "set_tab":
        tab = action.get("tab")
        if not tab or tab == state.active_tab:
            return state
        return state.replace(active_tab=tab)

    if action_type == "select_period":
        return _select_period(state, action)

    if action_type == "replace_all":
        return _replace_all(state, action)

    if action_type == "clear_all":
        return state.replace(transactions=(), investments=(), debts=())

    logger.debug(f"Ignoring unknown action {action_type!r}")
    return state


def _add_record(state: AppState, document: str, payload: Dict[str, Any]) -> AppState:
    record_class = RECORD_CLASSES[document]
    record_id = payload.get("id") or generate_id()
    if state.find(document, record_id) is not None:
        logger.debug(f"Ignoring add to {document}: id {record_id} already exists")
        return state
    try:
        record = record_class.from_dict(payload, id=record_id)
    except FinsightError as e:
        logger.debug(f"Ignoring invalid {document} entry: {e.message}")
        return state
    return state.replace(**{document: state.collection(document) + (record,)})


def _update_record(state: AppState, document: str, record_id: Optional[str], payload: Dict[str, Any]) -> AppState:
    existing = state.find(document, record_id) if record_id else None
    if existing is None:
        logger.debug(f"Ignoring update to {document}: id {record_id} not found")
        return state

    merged = {**existing.to_dict(), **payload, "id": record_id}
    try:
        updated = RECORD_CLASSES[document].from_dict(merged, id=record_id)
    except FinsightError as e:
        logger.debug(f"Ignoring invalid {document} update: {e.message}")
        return state

    records = tuple(updated if r.id == record_id else r for r in state.collection(document))
    return state.replace(**{document: records})


def _delete_record(state: AppState, document: str, record_id: Optional[str]) -> AppState:
    if not record_id or state.find(document, record_id) is None:
        return state
    records = tuple(r for r in state.collection(document) if r.id != record_id)
    return state.replace(**{document: records})


def _select_period(state: AppState, action: Dict[str, Any]) -> AppState:
    changes = {}
    if is_iso_date(action.get("date")):
        changes["selected_date"] = action["date"]
    if action.get("month"):
        changes["selected_month"] = str(action["month"])[:7]
    if action.get("year"):
        changes["selected_year"] = str(action["year"])[:4]
    return state.replace(**changes) if changes else state


def _replace_all(state: AppState, action: Dict[str, Any]) -> AppState:
    """
    Swap in imported collections.

    Collections absent from the action are kept. All provided collections
    are validated before any is applied, so an invalid import changes nothing.
    """
    changes = {}
    try:
        for document in RECORD_CLASSES:
            if action.get(document) is not None:
                changes[document] = records_from_dicts(document, action[document])
    except FinsightError as e:
        logger.warning(f"Ignoring import with invalid records: {e.message}")
        return state
    return state.replace(**changes) if changes else state
