from __future__ import annotations

import dataclasses
import re

import pytest
from click.testing import CliRunner

from snapper import _highlight, cli

SAMPLE = [1, 2]
NOT_CALLABLE = 5


@dataclasses.dataclass
class Point:
    x: int
    y: int


POINT = Point(1, 2)


def make_sample():
    return {"b": 1, "a": 2}


def recursive():
    v = []
    v.append(v)
    return v


ANSI = re.compile(r"\x1b\[[0-9;]*m")


@pytest.fixture
def runner():
    return CliRunner()


def test_target(runner):
    result = runner.invoke(cli.main, [f"{__name__}.SAMPLE", "--no-color"])
    assert result.exit_code == 0, result.output
    assert result.output == "list[int]{\n\t1,\n\t2,\n}\n"


def test_options(runner):
    result = runner.invoke(
        cli.main,
        [
            f"{__name__}.make_sample",
            "--call",
            "--sort-keys",
            "--indent",
            "2",
            "--no-color",
        ],
    )
    assert result.exit_code == 0, result.output
    assert result.output == 'dict[str, int]{\n  "a": 2,\n  "b": 1,\n}\n'


def test_aliases(runner):
    result = runner.invoke(
        cli.main, [f"{__name__}.POINT", "-a", f"{__name__}=", "--no-color"]
    )
    assert result.exit_code == 0, result.output
    assert result.output == "Point{\n\tx: 1,\n\ty: 2,\n}\n"

    result = runner.invoke(
        cli.main,
        [f"{__name__}.POINT", "--alias", f"{__name__}=pts", "--no-color"],
    )
    assert result.exit_code == 0, result.output
    assert result.output.startswith("pts.Point{")


def test_bad_arguments(runner):
    result = runner.invoke(cli.main, [f"{__name__}.SAMPLE", "-a", "nope"])
    assert result.exit_code == 2
    assert "OLD=NEW" in result.output

    result = runner.invoke(cli.main, ["i.do.not.exist"])
    assert result.exit_code == 2
    assert "not found" in result.output

    result = runner.invoke(cli.main, [f"{__name__}.NOT_CALLABLE", "--call"])
    assert result.exit_code == 2
    assert "not callable" in result.output


def test_recursive_value(runner):
    result = runner.invoke(cli.main, [f"{__name__}.recursive", "--call"])
    assert result.exit_code == 1
    assert "Recursive value found" in result.output


def test_color(runner):
    result = runner.invoke(cli.main, [f"{__name__}.SAMPLE", "--color"])
    assert result.exit_code == 0, result.output
    assert "\x1b[" in result.output
    assert ANSI.sub("", result.output) == "list[int]{\n\t1,\n\t2,\n}\n"


def test_highlight():
    code = 'Point{\n\tx: 1,\n\tname: "a",\n}'
    highlighted = _highlight.highlight(code)
    assert highlighted != code
    assert ANSI.sub("", highlighted) == code
    assert ANSI.sub("", _highlight.highlight(code, style="light")) == code
