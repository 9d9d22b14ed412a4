"""Output formatting for DynamoDB Query Tool."""

from __future__ import annotations

import base64
import json
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from boto3.dynamodb.types import Binary
from tabulate import tabulate


def _json_default(value):
    """Serialize the non-JSON types DynamoDB items carry"""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Binary):
        return base64.b64encode(bytes(value.value)).decode("ascii")
    return str(value)


def flatten_dict_keys(d, parent_key="", sep="."):
    """Flatten nested item attributes into dotted keys"""
    items: List[tuple] = []
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k
        if isinstance(v, dict):
            items.extend(flatten_dict_keys(v, new_key, sep=sep).items())
        elif isinstance(v, list):
            for i, item in enumerate(v):
                if isinstance(item, dict):
                    items.extend(flatten_dict_keys(item, f"{new_key}.{i}", sep=sep).items())
                else:
                    items.append((f"{new_key}.{i}", item))
        else:
            items.append((new_key, v))
    return dict(items)


def format_item_json(item: Dict[str, Any]) -> str:
    return json.dumps(item, indent=2, default=_json_default)


def _cell(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value[:77] + "..." if len(value) > 80 else value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return json.dumps(value, default=_json_default).strip('"')


def format_table_output(items: Sequence[Dict[str, Any]]) -> str:
    """Format items as a grid using tabulate"""
    if not items:
        return "No items found."

    flattened = [flatten_dict_keys(item) for item in items]
    all_keys = []
    for flat in flattened:
        for key in flat.keys():
            if key not in all_keys:
                all_keys.append(key)
    headers = sorted(all_keys, key=str.lower)

    table_data = [[_cell(flat.get(key)) for key in headers] for flat in flattened]
    return tabulate(table_data, headers=headers, tablefmt="grid")


def format_json_output(items: Sequence[Dict[str, Any]]) -> str:
    """Format every item as indented JSON, one block per item"""
    if not items:
        return "No items found."
    return "\n".join(format_item_json(item) for item in items)


def format_count(items: Sequence[Dict[str, Any]]) -> str:
    return f"{len(items)} item(s) found"


def format_page(items: Sequence[Dict[str, Any]], output_format: str = "json") -> str:
    """Render one page of items followed by its item count"""
    if output_format == "table":
        body = format_table_output(items)
    else:
        body = format_json_output(items)
    return f"{body}\n{format_count(items)}"
