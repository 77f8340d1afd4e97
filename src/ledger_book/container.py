"""Dependency injection container for the ledger book client.

Wires one HTTP client and the service collaborators from Settings, and hands
out Book instances sharing them.

Usage:
    from ledger_book.container import Container

    with Container() as container:
        book = container.get_book("agtzfmJrcGVy")
        print(book.name)
"""

from functools import cached_property, lru_cache

from ledger_book.api_client import LedgerAPIClient
from ledger_book.book import Book
from ledger_book.config import Settings, get_settings
from ledger_book.logging_config import get_logger
from ledger_book.services import (
    AccountServiceImpl,
    BookServiceImpl,
    GroupServiceImpl,
    TransactionServiceImpl,
)

logger = get_logger(__name__)


class Container:
    """Lazily builds and caches the API client and services.

    A pre-built client can be injected for testing:

        client = LedgerAPIClient(client=httpx.Client(transport=transport, base_url="http://test"))
        container = Container(client=client)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: LedgerAPIClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._injected_client = client
        logger.debug(
            "container_created",
            api_base_url=self._settings.api_base_url,
            environment=self._settings.environment.value,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @cached_property
    def api_client(self) -> LedgerAPIClient:
        if self._injected_client is not None:
            return self._injected_client
        logger.info("creating_api_client", base_url=self._settings.api_base_url)
        return LedgerAPIClient.from_settings(self._settings)

    @cached_property
    def book_service(self) -> BookServiceImpl:
        return BookServiceImpl(self.api_client)

    @cached_property
    def account_service(self) -> AccountServiceImpl:
        return AccountServiceImpl(self.api_client)

    @cached_property
    def group_service(self) -> GroupServiceImpl:
        return GroupServiceImpl(self.api_client)

    @cached_property
    def transaction_service(self) -> TransactionServiceImpl:
        return TransactionServiceImpl(self.api_client)

    def get_book(self, book_id: str) -> Book:
        """Get a handle on a book. Nothing is fetched until it is read."""
        return Book(
            book_id,
            book_service=self.book_service,
            account_service=self.account_service,
            group_service=self.group_service,
            transaction_service=self.transaction_service,
            page_size=self._settings.page_size,
        )

    def close(self) -> None:
        """Close the HTTP client if one was created."""
        if "api_client" in self.__dict__:
            logger.debug("closing_api_client")
            self.api_client.close()

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_container: Container | None = None


@lru_cache
def get_container() -> Container:
    """Get the global container singleton, created with default settings."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container, closing its client."""
    global _container
    if _container is not None:
        _container.close()
        _container = None
    get_container.cache_clear()
