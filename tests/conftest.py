"""Shared documents for the jq-view test suite."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def nested_doc() -> dict[str, Any]:
    return {"a": {"b": {"c": 1}}}


@pytest.fixture
def items_doc() -> dict[str, Any]:
    return {"items": [{"x": 1, "y": 2}, {"x": 3, "y": 4}]}


@pytest.fixture
def owner_doc() -> dict[str, Any]:
    return {"meta": {"owner": "ann", "version": 2}, "items": [{"x": 1}, {"x": 2}]}
