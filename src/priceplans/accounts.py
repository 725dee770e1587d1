"""Meter to supplier account directory."""

from pathlib import Path

from .errors import CatalogueError, UnknownAccountError
from .plans import load_config


class AccountDirectory:
    """Maps a smart meter ID to the supplier its account is on."""

    def __init__(self, accounts: dict[str, str]):
        self._accounts = dict(accounts)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AccountDirectory":
        accounts = load_config(config_path).get("accounts") or {}
        if not isinstance(accounts, dict):
            raise CatalogueError(config_path, "accounts must map meter IDs to suppliers")
        return cls({str(meter_id): supplier for meter_id, supplier in accounts.items()})

    def get_supplier_for_account(self, meter_id: str) -> str:
        try:
            return self._accounts[meter_id]
        except KeyError:
            raise UnknownAccountError(meter_id) from None

    def meter_ids(self) -> list[str]:
        return list(self._accounts)
