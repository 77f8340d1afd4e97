"""Account and group creation over the HTTP API."""

from typing import Any

from ledger_book.api_client import LedgerAPIClient
from ledger_book.services.interfaces import AccountService, GroupService


def _batch_items(data: Any) -> list[dict[str, Any]]:
    if not data:
        return []
    return list(data.get("items") or [])


class AccountServiceImpl(AccountService):
    def __init__(self, client: LedgerAPIClient) -> None:
        self._client = client

    def create_accounts(
        self, book_id: str, accounts: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        data = self._client.request_json(
            "POST", f"/v5/books/{book_id}/accounts/batch", json={"items": accounts}
        )
        return _batch_items(data)

    def create_account(
        self,
        book_id: str,
        name: str,
        group: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Create one account; its type is inferred remotely from the group."""
        payload: dict[str, Any] = {"name": name}
        if group:
            payload["groups"] = [{"name": group}]
        if description:
            payload["description"] = description
        data = self._client.request_json(
            "POST", f"/v5/books/{book_id}/accounts", json=payload
        )
        assert isinstance(data, dict)
        return data


class GroupServiceImpl(GroupService):
    def __init__(self, client: LedgerAPIClient) -> None:
        self._client = client

    def create_groups(
        self, book_id: str, groups: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        data = self._client.request_json(
            "POST", f"/v5/books/{book_id}/groups/batch", json={"items": groups}
        )
        return _batch_items(data)
