import csv

from wildfire_utility.report import ReportAggregator
from wildfire_utility.schemas import ApiResult


def make_report():
    report = ReportAggregator()
    report.add(ApiResult("a.exe", {"sha256": "aa", "verdict": "Benign", "HTTP Response '200'": "OK; Successful call."}))
    report.add(ApiResult("bad", {"Parameter Error": "Invalid hash format."}))
    return report


def read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_render_console_blocks():
    assert make_report().render() == (
        "Parameter: a.exe\n"
        "\tsha256: aa\n"
        "\tverdict: Benign\n"
        "\tHTTP Response '200': OK; Successful call.\n"
        "\n"
        "Parameter: bad\n"
        "\tParameter Error: Invalid hash format.\n"
        "\n"
    )


def test_render_empty():
    assert ReportAggregator().render() == ""


def test_columns_first_seen_order():
    assert make_report().columns() == [
        "Parameter", "sha256", "verdict", "HTTP Response '200'", "Parameter Error"
    ]


def test_duplicates_are_kept():
    report = ReportAggregator()
    report.add(ApiResult("x", {"verdict": "Benign"}))
    report.add(ApiResult("x", {"verdict": "Malware"}))
    assert [row["verdict"] for row in report.to_dicts()] == ["Benign", "Malware"]


def test_write_csv(tmp_path):
    path = tmp_path / "results.csv"
    make_report().write_csv(str(path))

    rows = read_csv(path)
    assert rows[0] == ["Parameter", "sha256", "verdict", "HTTP Response '200'", "Parameter Error"]
    assert rows[1] == ["a.exe", "aa", "Benign", "OK; Successful call.", ""]
    assert rows[2] == ["bad", "", "", "", "Invalid hash format."]


def test_write_csv_append_keeps_single_header(tmp_path):
    path = tmp_path / "results.csv"
    make_report().write_csv(str(path), append=True)
    make_report().write_csv(str(path), append=True)

    rows = read_csv(path)
    assert len(rows) == 5
    assert rows[0][0] == "Parameter"
    assert rows[3][0] == "a.exe"


def test_write_csv_replaces_by_default(tmp_path):
    path = tmp_path / "results.csv"
    make_report().write_csv(str(path))
    make_report().write_csv(str(path))
    assert len(read_csv(path)) == 3


def test_append_to_header_missing_columns_keeps_header(tmp_path, caplog):
    path = tmp_path / "results.csv"
    path.write_text("Parameter,verdict\nold.exe,Benign\n", encoding="utf-8")

    report = ReportAggregator()
    report.add(ApiResult("new.exe", {"sha256": "bb", "verdict": "Malware"}))
    report.write_csv(str(path), append=True)

    assert read_csv(path) == [
        ["Parameter", "verdict"],
        ["old.exe", "Benign"],
        ["new.exe", "Malware"],
    ]
    assert "no column for: sha256" in caplog.text
