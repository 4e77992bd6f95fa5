from __future__ import annotations

from orderdesk.adapters.bulk_csv import split_fields


def test_split_fields_plain_commas() -> None:
    assert split_fields("a,b,c") == ["a", "b", "c"]


def test_split_fields_keeps_commas_inside_quotes() -> None:
    line = 'Asha Rao,9990001111,Kondapur,2024-05-02 10:00:00,"Almond Basbousa, Cashew Basbousa",650'

    fields = split_fields(line)

    assert len(fields) == 6
    assert fields[4] == "Almond Basbousa, Cashew Basbousa"
    assert fields[5] == "650"


def test_split_fields_quotes_only_toggle() -> None:
    assert split_fields('"a"b,"c,d"') == ["ab", "c,d"]


def test_split_fields_empty_fields_are_kept() -> None:
    assert split_fields(",,") == ["", "", ""]
    assert split_fields("") == [""]


def test_split_fields_unterminated_quote_swallows_rest() -> None:
    assert split_fields('a,"b,c') == ["a", "b,c"]
