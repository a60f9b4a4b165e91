"""
Unit tests for the GitHub Actions host adapter.
"""

from unittest.mock import patch

import pytest

from shared.actions import ActionsHost, escape_data, escape_property


class TestEscaping:
    """Workflow command escaping."""

    def test_escape_data(self):
        assert escape_data("50%\r\nline two") == "50%25%0D%0Aline two"

    def test_escape_property(self):
        assert escape_property("a:b,c") == "a%3Ab%2Cc"


class TestActionsHost:
    """Outputs and annotations."""

    def test_set_output_writes_heredoc_block(self, tmp_path):
        output_file = tmp_path / "github_output"
        host = ActionsHost({"GITHUB_OUTPUT": str(output_file)})

        host.set_output("summary", "- line one\n- line two")
        host.set_output("status", "200")

        lines = output_file.read_text().splitlines()
        assert lines[0].startswith("summary<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:4] == ["- line one", "- line two", delimiter]
        assert lines[4].startswith("status<<ghadelimiter_")
        assert lines[5] == "200"

    def test_set_output_without_file_uses_legacy_command(self, capsys):
        ActionsHost({}).set_output("status", "404")

        assert capsys.readouterr().out == "::set-output name=status::404\n"

    def test_set_output_rejects_delimiter_collision(self, tmp_path):
        host = ActionsHost({"GITHUB_OUTPUT": str(tmp_path / "out")})

        with patch("shared.actions.uuid4", return_value="fixed"):
            with pytest.raises(ValueError):
                host.set_output("summary", "text ghadelimiter_fixed text")

    def test_annotations(self, capsys):
        host = ActionsHost({})

        host.warning("API returned non-success status: 404")
        host.error("line one\nline two")
        host.notice("done")

        assert capsys.readouterr().out.splitlines() == [
            "::warning::API returned non-success status: 404",
            "::error::line one%0Aline two",
            "::notice::done",
        ]

    def test_set_failed_emits_error(self, capsys):
        ActionsHost({}).set_failed("BlackBox API key is required")

        assert capsys.readouterr().out == "::error::BlackBox API key is required\n"

    def test_add_mask(self, capsys):
        host = ActionsHost({})

        host.add_mask("bb-secret")
        host.add_mask("")

        assert capsys.readouterr().out == "::add-mask::bb-secret\n"
