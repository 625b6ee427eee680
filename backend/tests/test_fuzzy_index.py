"""Tests for the fuzzy index builder."""

import pytest

from app.services.catalog import CatalogEntry
from app.services.fuzzy_index import FieldWeights, build_index, normalize_text


class TestNormalizeText:
    """Test text normalization for matching."""

    def test_lowercases(self) -> None:
        assert normalize_text("ASMA") == "asma"

    def test_folds_accents(self) -> None:
        """Test accented characters compare equal to their plain form."""
        assert normalize_text("Cefaléia") == "cefaleia"
        assert normalize_text("Potássica") == normalize_text("potassica")

    def test_punctuation_becomes_space(self) -> None:
        assert normalize_text("Hipertensão essencial (primária)") == "hipertensao essencial primaria"

    def test_collapses_whitespace(self) -> None:
        assert normalize_text("  RM  -  Crânio ") == "rm cranio"

    def test_empty(self) -> None:
        assert normalize_text("") == ""
        assert normalize_text("   ") == ""


class TestFieldWeights:
    """Test field weight validation."""

    def test_defaults(self) -> None:
        """Test label ranks above aliases and aliases above code."""
        weights = FieldWeights()
        assert weights.label > weights.aliases > weights.code

    def test_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="code"):
            FieldWeights(code=1.5)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="aliases"):
            FieldWeights(aliases=-0.1)


class TestBuildIndex:
    """Test index construction."""

    def test_one_document_per_entry_without_aliases(self) -> None:
        """Test entries without aliases produce exactly one document."""
        entries = [
            CatalogEntry(code="J45", label="Asma"),
            CatalogEntry(code="R51", label="Cefaléia"),
        ]
        index = build_index(entries, FieldWeights())
        assert len(index.documents) == 2
        assert [d.entry_position for d in index.documents] == [0, 1]

    def test_alias_expansion(self) -> None:
        """Test each alias becomes a document pointing to the same entry."""
        entries = [
            CatalogEntry(
                code="Dipirona",
                label="DIPIRONA MONOIDRATADA",
                aliases=("Dipirona", "Novalgina", "Metamizol"),
            )
        ]
        index = build_index(entries, FieldWeights())
        assert [d.term for d in index.documents] == [
            "dipirona monoidratada",
            "dipirona",
            "novalgina",
            "metamizol",
        ]
        assert {d.entry_position for d in index.documents} == {0}

    def test_duplicate_terms_collapsed(self) -> None:
        """Test an alias equal to the label does not add a document."""
        entries = [CatalogEntry(code="Atenolol", label="ATENOLOL", aliases=("Atenolol",))]
        index = build_index(entries, FieldWeights())
        assert len(index.documents) == 1

    def test_documents_carry_code_and_aliases(self) -> None:
        entries = [CatalogEntry(code="40304361", label="Hemograma", aliases=("HMG",))]
        index = build_index(entries, FieldWeights())
        assert all(d.code == "40304361" for d in index.documents)
        assert all(d.aliases_text == "hmg" for d in index.documents)

    def test_settings_kept(self) -> None:
        weights = FieldWeights(label=1.0, aliases=0.75, code=0.25)
        index = build_index([], weights, name="procedure", min_score=0.5, min_query_length=4)
        assert index.name == "procedure"
        assert index.weights is weights
        assert index.min_score == 0.5
        assert index.min_query_length == 4

    def test_empty_catalog(self) -> None:
        """Test an empty catalog yields a valid empty index."""
        index = build_index([], FieldWeights())
        assert index.is_empty
        assert index.entries == ()

    def test_entries_keep_order(self) -> None:
        entries = [CatalogEntry(code=c, label=f"Termo {c}") for c in ("B", "A", "C")]
        index = build_index(entries, FieldWeights())
        assert [e.code for e in index.entries] == ["B", "A", "C"]
