"""Output helpers."""

import io
import json

from yougile_cli.cli import json_output, table_output


def render(headers, rows):
    buf = io.StringIO()
    table_output(headers, rows, file=buf)
    return buf.getvalue().splitlines()


def test_table_columns_fit_widest_cell():
    assert render(["ID", "Title"], [["1", "Alpha"], ["22", "B"]]) == [
        "ID  Title",
        "---------",
        "1   Alpha",
        "22  B",
    ]


def test_table_never_truncates():
    long_title = "x" * 200
    lines = render(["ID", "Title"], [["id-1", long_title]])
    assert lines[2].endswith(long_title)
    assert all(h in lines[0] for h in ("ID", "Title"))


def test_table_headers_only():
    assert render(["ID", "Name"], []) == ["ID  Name", "--------"]


def test_table_without_headers_prints_nothing():
    assert render([], [["a"]]) == []


def test_json_output_compact_and_pretty():
    buf = io.StringIO()
    json_output({"title": "Задача", "n": 1}, file=buf)
    json_output({"n": 1}, pretty=True, file=buf)
    compact, *pretty = buf.getvalue().splitlines()
    assert compact == '{"title": "Задача", "n": 1}'
    assert json.loads("\n".join(pretty)) == {"n": 1}
    assert pretty[1] == '  "n": 1'
