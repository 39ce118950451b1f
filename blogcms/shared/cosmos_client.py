# Cosmos DB access shared by the post and tag operations

import time
import logging
from functools import lru_cache
from typing import Optional, List, Dict, Any, Iterator, Mapping
from azure.core import MatchConditions
from azure.cosmos import CosmosClient, exceptions
from azure.cosmos.container import ContainerProxy
from azure.cosmos.database import DatabaseProxy
from azure.identity import DefaultAzureCredential
from blogcms.shared.settings import Settings, get_settings

# Server-managed properties that must not be echoed back on replace
SYSTEM_PROPERTIES = ("_rid", "_self", "_etag", "_attachments", "_ts")


def strip_system_properties(item: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in item.items() if k not in SYSTEM_PROPERTIES}


class CosmosDBClient:
    """Thin wrapper over a Cosmos database resolving logical container names.

    Operations receive an instance explicitly; tests hand in a database proxy
    backed by an in-memory fake.
    """

    DEFAULT_PAGE_SIZE = 100

    def __init__(
        self,
        database: DatabaseProxy,
        container_names: Optional[Dict[str, str]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.database = database
        self.container_names = dict(container_names or {})
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "CosmosDBClient":
        """Build the SDK client from a connection string, an account key or an Azure AD identity."""
        if settings.connection_string:
            client = CosmosClient.from_connection_string(
                settings.connection_string,
                retry_total=settings.retry_total
            )
        else:
            credential = settings.key or DefaultAzureCredential()
            client = CosmosClient(
                settings.endpoint,
                credential=credential,
                retry_total=settings.retry_total
            )
        return cls(
            client.get_database_client(settings.database_name),
            container_names=settings.container_names,
            page_size=settings.posts_page_size,
        )

    def get_container(self, container_name: str) -> ContainerProxy:
        actual_name = self.container_names.get(container_name, container_name)
        return self.database.get_container_client(actual_name)

    def read_item(
        self,
        container_name: str,
        item_id: str,
        partition_key: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Read an item by ID

        Args:
            container_name: Logical name of the container
            item_id: ID of the item to retrieve
            partition_key: Optional partition key (defaults to item_id)

        Returns:
            The item including its system properties, or None if it does not exist
        """
        container = self.get_container(container_name)
        try:
            return container.read_item(item=item_id, partition_key=partition_key or item_id)
        except exceptions.CosmosResourceNotFoundError:
            logging.getLogger("blogcms").debug(f"Item not found: {container_name}/{item_id}")
            return None

    def iter_items(
        self,
        container_name: str,
        query: str = "SELECT * FROM c",
        parameters: Optional[List[Dict[str, Any]]] = None,
        page_size: Optional[int] = None
    ) -> Iterator[Dict[str, Any]]:
        """
        Stream query results page by page instead of materialising the whole container

        Args:
            container_name: Logical name of the container
            query: The query to execute (use @param syntax for parameters)
            parameters: List of parameter dictionaries with 'name' and 'value'
            page_size: Items per round trip (defaults to the client's page size)
        """
        container = self.get_container(container_name)
        pages = container.query_items(
            query=query,
            parameters=parameters or [],
            enable_cross_partition_query=True,
            max_item_count=page_size or self.page_size
        ).by_page()
        start_time = time.time()
        for page_number, page in enumerate(pages, start=1):
            items = list(page)
            logging.getLogger("blogcms").debug(
                f"Read page {page_number} of '{container_name}' ({len(items)} items), "
                f"{time.time() - start_time:.2f}s elapsed"
            )
            yield from items

    def upsert_item(self, container_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create or fully replace an item"""
        container = self.get_container(container_name)
        return container.upsert_item(body=item)

    def create_item(self, container_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create an item; raises CosmosResourceExistsError if the id is taken"""
        container = self.get_container(container_name)
        return container.create_item(body=item)

    def replace_item(
        self,
        container_name: str,
        item: Dict[str, Any],
        etag: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Replace an item, optionally only if it is unchanged since it was read

        Args:
            container_name: Logical name of the container
            item: The full new body (must carry 'id')
            etag: The _etag from the read; when given a concurrent change raises
                CosmosAccessConditionFailedError (HTTP 412)
        """
        container = self.get_container(container_name)
        kwargs: Dict[str, Any] = {}
        if etag:
            kwargs = {"etag": etag, "match_condition": MatchConditions.IfNotModified}
        return container.replace_item(item=item["id"], body=item, **kwargs)


# Singleton instance with caching, for long-lived hosts
@lru_cache(maxsize=1)
def get_cosmos_client() -> CosmosDBClient:
    """Get or create the process-wide CosmosDBClient built from the environment"""
    return CosmosDBClient.from_settings(get_settings())
