"""
Backup file import and export.

A backup file is a JSON object with ``transactions``, ``investments`` and
``debts`` arrays of camelCase records. A bare array is read as a
transactions-only backup.
"""

from typing import Any, Dict

from finsight.core.constants import COLLECTION_DOCUMENTS
from finsight.core.state import AppState, records_from_dicts
from finsight.utils.error_utils import DataFormatError, FinsightError


def export_backup(state: AppState) -> Dict[str, list]:
    """Collections of a state in backup-file form."""
    return state.export()


def parse_backup(data: Any) -> Dict[str, tuple]:
    """
    Validate a backup file.

    Only the collections present in the file are returned; the caller keeps
    the others untouched.

    Args:
        data: Decoded JSON content of the file

    Returns:
        Dictionary mapping document name to a tuple of records

    Raises:
        DataFormatError: If the file is not a backup or any record is invalid
    """
    if isinstance(data, list):
        data = {"transactions": data}
    if not isinstance(data, dict):
        raise DataFormatError(f"Backup must be a JSON object or array, got {type(data).__name__}")

    provided = [name for name in COLLECTION_DOCUMENTS if data.get(name) is not None]
    if not provided:
        raise DataFormatError(
            "Backup contains none of: " + ", ".join(COLLECTION_DOCUMENTS),
            {"keys": sorted(data)},
        )

    collections = {}
    for name in provided:
        if not isinstance(data[name], list):
            raise DataFormatError(f"'{name}' must be an array", {"document": name})
        try:
            collections[name] = records_from_dicts(name, data[name])
        except FinsightError as e:
            raise DataFormatError(f"Invalid {name}: {e.message}", {"document": name})
    return collections
