"""Shared test fixtures for waterslide."""

import json

import pytest


@pytest.fixture
def records():
    return [
        {"id": 3, "name": "carol", "active": True},
        {"id": 1, "name": "alice", "active": True},
        {"id": 2, "name": "bob", "active": False},
    ]


@pytest.fixture
def jsonl_file(tmp_path, records):
    path = tmp_path / "records.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n\n")
    return path


@pytest.fixture
def config_file(tmp_path, jsonl_file):
    path = tmp_path / "pipeline.yaml"
    path.write_text(
        "source:\n"
        "  type: jsonl\n"
        f"  path: {jsonl_file}\n"
        "stages:\n"
        "  - json_decode\n"
        "  - stage: field_equals\n"
        "    params: {field: active, value: true}\n"
        "  - stage: sort\n"
        "    params: {key: name}\n"
        "  - stage: pluck\n"
        "    params: {fields: [id, name]}\n"
        "  - stage: json_encode\n"
        "    params: {sort_keys: true}\n"
    )
    return path
