import pytest

from spacewallet.export import WalletExport, remove_checksum

EXTERNAL = "tr(tprvplaceholder/86'/1'/0'/0/*)#abcdefgh"
INTERNAL = "tr(tprvplaceholder/86'/1'/0'/1/*)#hgfedcba"


def test_remove_checksum():
    assert remove_checksum("abc#def") == "abc"


def test_remove_checksum_requires_hash():
    with pytest.raises(ValueError):
        remove_checksum("abc")


def test_from_descriptors():
    export = WalletExport.from_descriptors(EXTERNAL, INTERNAL, "main", 100)
    assert export.descriptor == "tr(tprvplaceholder/86'/1'/0'/0/*)"
    assert export.change_descriptor() == "tr(tprvplaceholder/86'/1'/0'/1/*)"
    assert export.blockheight == 100
    assert export.label == "main"


def test_incompatible_change_descriptor():
    with pytest.raises(ValueError, match="Incompatible change descriptor"):
        WalletExport.from_descriptors(EXTERNAL, "tr(other/1/*)#xyz", "main", 0)


def test_no_change_descriptor_without_external_path():
    assert WalletExport("tr(key)", 0, "x").change_descriptor() is None


def test_json_layout():
    assert WalletExport("d", 5, "w").to_json() == '{"descriptor":"d","blockheight":5,"label":"w"}'


def test_json_round_trip():
    export = WalletExport.from_descriptors(EXTERNAL, INTERNAL, "main", 7)
    assert WalletExport.from_json(export.to_json()) == export
    assert str(export) == export.to_json()


def test_from_json_missing_field():
    with pytest.raises(ValueError):
        WalletExport.from_json('{"descriptor":"d","label":"w"}')


def test_from_json_bad_height():
    with pytest.raises(ValueError):
        WalletExport.from_json('{"descriptor":"d","blockheight":-1,"label":"w"}')