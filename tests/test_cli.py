"""Tests for the command line interface."""

import json
import sys
from unittest.mock import patch

import pytest

from waterslide.cli import build_parser, format_item, main


class TestFormatItem:

    def test_strings_pass_through(self):
        assert format_item('{"a": 1}') == '{"a": 1}'

    def test_bytes_are_decoded(self):
        assert format_item(b'abc') == 'abc'

    def test_objects_become_json(self):
        assert format_item({'a': 'é'}) == '{"a": "é"}'


class TestRunCommand:

    def test_run_writes_stdout(self, config_file, capsys):
        assert main(['run', str(config_file)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == ['{"id": 1, "name": "alice"}', '{"id": 3, "name": "carol"}']

    def test_run_writes_output_file_with_limit(self, config_file, tmp_path):
        output = tmp_path / 'out.jsonl'

        assert main(['run', str(config_file), '-o', str(output), '-n', '1']) == 0

        assert [json.loads(l) for l in output.read_text().splitlines()] == [
            {'id': 1, 'name': 'alice'}
        ]

    def test_input_override(self, config_file, tmp_path, capsys):
        other = tmp_path / 'other.jsonl'
        other.write_text('{"id": 9, "name": "zed", "active": true}\n')

        assert main(['run', str(config_file), '-i', str(other)]) == 0

        assert capsys.readouterr().out.splitlines() == ['{"id": 9, "name": "zed"}']

    def test_stats_go_to_stderr(self, config_file, capsys):
        assert main(['run', str(config_file), '--stats']) == 0

        captured = capsys.readouterr()
        assert 'PIPELINE SUMMARY' in captured.err
        assert 'PIPELINE SUMMARY' not in captured.out

    def test_missing_config_fails(self, tmp_path):
        assert main(['run', str(tmp_path / 'missing.yaml')]) == 1

    def test_stage_failure_fails(self, tmp_path):
        data = tmp_path / 'bad.jsonl'
        data.write_text('{not json\n')
        config = tmp_path / 'pipeline.yaml'
        config.write_text(f"source: {{type: jsonl, path: '{data}'}}\nstages: [json_decode]\n")

        assert main(['run', str(config)]) == 1

    def test_unwritable_output_fails(self, config_file, tmp_path):
        output = tmp_path / 'missing-dir' / 'out.jsonl'

        assert main(['run', str(config_file), '-o', str(output)]) == 1
        assert not output.exists()

    def test_output_is_a_directory(self, config_file, tmp_path):
        assert main(['run', str(config_file), '-o', str(tmp_path)]) == 1

    def test_bloom_stage_without_pybloom_fails(self, jsonl_file, tmp_path):
        config = tmp_path / 'pipeline.yaml'
        config.write_text(
            f"source: {{type: jsonl, path: '{jsonl_file}'}}\n"
            "stages: [{stage: unique, params: {method: bloom}}]\n"
        )

        with patch.dict(sys.modules, {'pybloom_live': None}):
            assert main(['run', str(config)]) == 1
            assert main(['config', '--validate', str(config)]) == 1


class TestConfigCommand:

    def test_create_default(self, tmp_path, capsys):
        output = tmp_path / 'conf' / 'pipeline.yaml'

        assert main(['config', '--create-default', '-o', str(output)]) == 0

        assert output.exists()
        assert 'Default configuration created' in capsys.readouterr().out

    def test_validate_valid(self, config_file, capsys):
        assert main(['config', '--validate', str(config_file)]) == 0
        assert 'Configuration is valid' in capsys.readouterr().out

    def test_validate_invalid(self, tmp_path, capsys):
        path = tmp_path / 'bad.yaml'
        path.write_text("stages: [teleport]\n")

        assert main(['config', '--validate', str(path)]) == 1
        assert 'unknown stage' in capsys.readouterr().out

    def test_config_needs_an_action(self):
        assert main(['config']) == 1


class TestParser:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert 'usage' in capsys.readouterr().out

    def test_limit_must_be_int(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['run', 'x.yaml', '-n', 'many'])
