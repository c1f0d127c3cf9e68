"""Tests for the bundled sources."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from waterslide import wrap
from waterslide.pipeline.stages import JsonDecode
from waterslide.sources import (
    HttpJsonSource,
    HttpSourceConfig,
    HttpSourceError,
    JsonLinesSource,
)


def make_response(payload, status_ok=True):
    response = MagicMock()
    response.json.return_value = payload
    if not status_ok:
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    return response


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    with patch.object(HttpJsonSource, '_create_session', return_value=session):
        yield session


class TestJsonLinesSource:

    def test_reads_lines_without_newlines(self, tmp_path):
        path = tmp_path / "lines.txt"
        path.write_text("a\nb\r\nc")
        assert list(JsonLinesSource(path)) == ["a", "b", "c"]

    def test_is_restartable(self, jsonl_file):
        source = JsonLinesSource(jsonl_file)
        assert list(source) == list(source)

    def test_feeds_json_decode(self, jsonl_file, records):
        assert (wrap(JsonLinesSource(jsonl_file)) >> JsonDecode).all() == records

    def test_missing_file_fails_on_first_pull(self, tmp_path):
        stage = wrap(JsonLinesSource(tmp_path / "missing.jsonl"))
        with pytest.raises(FileNotFoundError):
            stage.take()


class TestHttpJsonSource:

    def test_reads_list_body(self, mock_session):
        mock_session.get.return_value = make_response([{"id": 1}, {"id": 2}])

        source = HttpJsonSource("https://api.example.com/items")

        assert list(source) == [{"id": 1}, {"id": 2}]
        mock_session.get.assert_called_once_with(
            "https://api.example.com/items", timeout=30, verify=True
        )
        mock_session.close.assert_called_once()

    def test_follows_pagination(self, mock_session):
        mock_session.get.side_effect = [
            make_response({"results": [1, 2], "next": "/items?page=2"}),
            make_response({"results": [3], "next": None}),
        ]
        config = HttpSourceConfig(items_key="results", next_key="next")

        source = HttpJsonSource("https://api.example.com/items", config)

        assert list(source) == [1, 2, 3]
        assert mock_session.get.call_args_list[1].args[0] == "https://api.example.com/items?page=2"
        assert source.pages_fetched == 2

    def test_fetches_pages_lazily(self, mock_session):
        mock_session.get.side_effect = [
            make_response({"results": [1, 2], "next": "/p2"}),
            make_response({"results": [3], "next": None}),
        ]
        config = HttpSourceConfig(items_key="results", next_key="next")

        stage = wrap(HttpJsonSource("https://api.example.com/items", config))

        assert mock_session.get.call_count == 0
        assert stage.first(2) == [1, 2]
        assert mock_session.get.call_count == 1

    def test_max_pages(self, mock_session):
        mock_session.get.return_value = make_response({"results": [1], "next": "/again"})
        config = HttpSourceConfig(items_key="results", next_key="next", max_pages=3)

        assert list(HttpJsonSource("https://api.example.com/items", config)) == [1, 1, 1]

    def test_object_body_without_items_key(self, mock_session):
        mock_session.get.return_value = make_response({"results": []})

        with pytest.raises(HttpSourceError, match="items_key"):
            list(HttpJsonSource("https://api.example.com/items"))

    def test_items_key_not_a_list(self, mock_session):
        mock_session.get.return_value = make_response({"results": "nope"})
        config = HttpSourceConfig(items_key="results")

        with pytest.raises(HttpSourceError):
            list(HttpJsonSource("https://api.example.com/items", config))

    def test_http_errors_propagate(self, mock_session):
        mock_session.get.return_value = make_response([], status_ok=False)

        with pytest.raises(requests.HTTPError):
            wrap(HttpJsonSource("https://api.example.com/items")).all()
        mock_session.close.assert_called_once()

    def test_session_has_retry_adapter_and_headers(self):
        config = HttpSourceConfig(max_retries=5, headers={"Authorization": "Bearer t"})
        session = HttpJsonSource("https://api.example.com", config)._create_session()
        try:
            adapter = session.get_adapter("https://api.example.com")
            assert adapter.max_retries.total == 5
            assert session.headers["Authorization"] == "Bearer t"
            assert session.headers["Accept"] == "application/json"
        finally:
            session.close()

    def test_default_retry_statuses(self):
        assert HttpSourceConfig().retry_on_status == [429, 500, 502, 503, 504]
