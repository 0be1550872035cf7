"""
📦 Module: load_data.py

Loading utilities for property snapshots.

The detection core works on an in-memory collection of property records. These
helpers are the thin entry points that turn a CSV file or a DataFrame into that
collection; they never transform values.

Functions:
- load_csv(path): Loads a CSV file into a pandas DataFrame.
- to_property_records(properties): DataFrame or iterable -> list of dict records.
"""
from collections.abc import Mapping

import pandas as pd


def load_csv(path: str) -> pd.DataFrame:
    """
    Loads a CSV file from a given path.

    Args:
        path (str): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded data as a pandas DataFrame.
    """
    return pd.read_csv(path)


def to_property_records(properties) -> list[dict]:
    """
    Normalize the accepted property inputs into a list of records.

    Args:
        properties: A pandas DataFrame (one row per property) or an iterable of
            mappings. ``None`` is treated as an empty collection.

    Returns:
        list[dict]: Shallow copies of the records, in input order.
    """
    if properties is None:
        return []
    if isinstance(properties, pd.DataFrame):
        return properties.to_dict(orient="records")

    records = []
    for record in properties:
        if not isinstance(record, Mapping):
            raise TypeError("Each property must be a mapping of field names to values.")
        records.append(dict(record))
    return records
