"""DynamoDB access for DynamoDB Query Tool."""

from typing import Any, Dict, List

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from .pagination import Page
from .schema import TableDescriptor
from .utils import debug_print


def create_session(region=None, profile=None):
    """Create boto3 session with optional region/profile"""
    debug_print(
        f"create_session called with region={repr(region)}, profile={repr(profile)}"
    )  # pragma: no mutate
    session_kwargs = {}
    if region and region.strip():
        session_kwargs["region_name"] = region
        debug_print(f"Added region_name={region} to session")  # pragma: no mutate
    if profile and profile.strip():
        session_kwargs["profile_name"] = profile
        debug_print(f"Added profile_name={profile} to session")  # pragma: no mutate
    debug_print(f"Creating session with kwargs: {session_kwargs}")  # pragma: no mutate
    return boto3.Session(**session_kwargs)


def _is_empty(value):
    return isinstance(value, (str, bytes, bytearray, set, frozenset)) and len(value) == 0


class DynamoDBStore:
    """Read-only view of DynamoDB that speaks plain Python values.

    Expression attribute values are serialized to the low-level attribute
    value format on the way out and items are deserialized on the way back.
    Continuation cursors are handed back to the caller untouched.
    """

    def __init__(self, client, convert_empty_values: bool = False) -> None:
        self.client = client
        self.convert_empty_values = convert_empty_values
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def list_tables(self) -> List[str]:
        paginator = self.client.get_paginator("list_tables")
        tables = []
        for page in paginator.paginate():
            tables.extend(page.get("TableNames", []))
        debug_print(f"Found {len(tables)} table(s)")  # pragma: no mutate
        return tables

    def describe_table(self, table_name: str) -> TableDescriptor:
        response = self.client.describe_table(TableName=table_name)
        return TableDescriptor.from_description(response["Table"])

    def scan(self, params: Dict[str, Any]) -> Page:
        return self._read("scan", params)

    def query(self, params: Dict[str, Any]) -> Page:
        return self._read("query", params)

    def serialize_value(self, value: Any) -> Dict[str, Any]:
        if self.convert_empty_values and _is_empty(value):
            value = None
        return self._serializer.serialize(value)

    def deserialize_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self._deserializer.deserialize(value) for key, value in item.items()}

    def _read(self, operation: str, params: Dict[str, Any]) -> Page:
        call_params = dict(params)
        if "ExpressionAttributeValues" in call_params:
            call_params["ExpressionAttributeValues"] = {
                placeholder: self.serialize_value(value)
                for placeholder, value in call_params["ExpressionAttributeValues"].items()
            }
        debug_print(f"Calling {operation} with {call_params}")  # pragma: no mutate

        response = getattr(self.client, operation)(**call_params)
        items = [self.deserialize_item(item) for item in response.get("Items", [])]
        return Page(items=items, cursor=response.get("LastEvaluatedKey"))


def create_store(region=None, endpoint=None, profile=None, convert_empty_values=False):
    """Build a DynamoDBStore from CLI options"""
    session = create_session(region=region, profile=profile)
    client_kwargs = {}
    if endpoint and endpoint.strip():
        client_kwargs["endpoint_url"] = endpoint
        debug_print(f"Using endpoint_url={endpoint}")  # pragma: no mutate
    client = session.client("dynamodb", **client_kwargs)
    return DynamoDBStore(client, convert_empty_values=convert_empty_values)
