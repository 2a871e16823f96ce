"""Tests for the inspection CLI."""

import json

import pytest

from panelgen.cli import build_parser, main


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_resolve_flags(self):
        args = build_parser().parse_args(["resolve", "--size", "square_1x1", "--width", "640", "--context-free"])
        assert args.size == "square_1x1"
        assert args.width == 640
        assert args.context_free is True


class TestCommands:
    def test_resolve_json(self, capsys):
        main(["resolve", "--size", "square_1x1", "--quality", "high", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert (data["width"], data["height"]) == (1024, 1024)
        assert data["sources"]["width"] == "size-preset"
        assert data["sources"]["steps"] == "quality-preset"
        assert data["strategy_id"] == "slot-aware"

    def test_resolve_slot_context_free(self, capsys):
        main(["resolve", "--template", "six-grid", "--slot", "row1-left", "--context-free", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["strategy_id"] == "context-free"
        assert data["sources"]["width"] == "model-default"

    def test_invalid_override_exits(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["resolve", "--width", "0", "--json"])
        assert excinfo.value.code == 1
        assert "width must be positive" in capsys.readouterr().out

    def test_quality_presets_table(self, capsys):
        main(["presets", "--kind", "quality"])
        out = capsys.readouterr().out
        assert "draft" in out
        assert "dpmpp_2m_sde" in out

    def test_slots_table(self, capsys):
        main(["slots", "four-grid"])
        assert "832x1280" in capsys.readouterr().out

    def test_unknown_template(self, capsys):
        main(["slots", "twelve-grid"])
        assert "Unknown template" in capsys.readouterr().out

    def test_adapters_table(self, capsys):
        main(["adapters", "flux1-schnell-fp8.safetensors", "--use-case", "comic"])
        assert "(flux)" in capsys.readouterr().out
