import logging

import pytest


@pytest.fixture(autouse=True)
def isolate_logging_state():
    """
    Keep tests independent of logging.disable() calls made by the pipeline runner
    when a config sets `logging: off`.
    """
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def neighborhood_x():
    """Seven properties in one neighborhood; id 7 carries an extreme value."""
    values = [100, 102, 98, 101, 99, 100, 500]
    return [
        {"id": i, "neighborhood": "X", "value": v, "squareFeet": 1500 + i}
        for i, v in enumerate(values, start=1)
    ]


@pytest.fixture
def mixed_snapshot():
    """Two neighborhoods plus properties that lack data or a neighborhood."""
    records = [
        {"id": 1, "neighborhood": "Hillside", "value": "$310,000", "squareFeet": 1800, "bedrooms": 3},
        {"id": 2, "neighborhood": "Hillside", "value": "$305,000", "squareFeet": 1750, "bedrooms": 3},
        {"id": 3, "neighborhood": "Hillside", "value": "$298,000", "squareFeet": 1820, "bedrooms": 3},
        {"id": 4, "neighborhood": "Hillside", "value": "$301,000", "squareFeet": 1790, "bedrooms": 4},
        {"id": 5, "neighborhood": "Hillside", "value": "$299,500", "squareFeet": 1810, "bedrooms": 3},
        {"id": 6, "neighborhood": "Hillside", "value": "$302,000", "squareFeet": 1760, "bedrooms": 3},
        {"id": 7, "neighborhood": "Hillside", "value": "$990,000", "squareFeet": 1800, "bedrooms": 3},
        {"id": 8, "neighborhood": "Riverside", "value": "$450,000", "squareFeet": 2200, "bedrooms": 4},
        {"id": 9, "neighborhood": "Riverside", "value": "$455,000", "squareFeet": 2250, "bedrooms": 4},
        {"id": 10, "neighborhood": None, "value": "$275,000", "squareFeet": 1600, "bedrooms": 2},
        {"id": 11, "neighborhood": "Hillside", "value": None, "squareFeet": 1700, "bedrooms": 3},
        {"id": 12, "neighborhood": "Hillside", "value": "not assessed", "squareFeet": 1700, "bedrooms": 3},
    ]
    return records
