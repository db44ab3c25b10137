from pathlib import Path

from recruiter_finder.io_csv import CSV_FIELDS, write_rows


def test_write_rows_creates_csv_with_schema(tmp_path: Path) -> None:
    output = tmp_path / "out.csv"
    write_rows(
        str(output),
        [
            {
                "id": "0",
                "name": "Jane Doe",
                "role": "Head of Talent",
                "type": "Recruiter",
                "score": "85",
                "reason": "Leads hiring, including data roles.",
                "link": "https://linkedin.com/in/janedoe",
                "email": "jane@acme.io",
                "email_mx_ok": "yes",
            }
        ],
    )
    text = output.read_text(encoding="utf-8")
    assert text.splitlines()[0] == ",".join(CSV_FIELDS)
    assert "jane@acme.io" in text
    assert '"Leads hiring, including data roles."' in text
