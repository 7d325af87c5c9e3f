"""
Unit tests for subsidy_links.core.identity.normalization.

Covers:
- Grouping-key normalization (accents, punctuation, legal forms, stopwords)
- The relaxed detection variant
- Totality and idempotence
"""

import unittest

from subsidy_links.core.identity.normalization import (
    normalize_for_detection,
    normalize_name,
    significant_words,
    strip_diacritics,
)


SAMPLES = [
    "parking.brussels",
    "PARKING.BRUSSELS",
    "Parking Brussels SA",
    "Café ASBL",
    "Maison de la Culture",
    "Théâtre/Vlaams_Huis|Test",
    "Foo scrl sa",
    "Le Sa",
    "  C.P.A.S. de Bruxelles  ",
    "L'Atelier",
    "***",
    "",
    "asbl",
    "De Kriekelaar vzw",
    "Ensemble   des   Musiques   and   the   Arts",
]


class TestNormalizeName(unittest.TestCase):
    def test_punctuation_variants_collide(self):
        self.assertEqual(normalize_name("parking.brussels"), "parking brussels")
        self.assertEqual(normalize_name("PARKING.BRUSSELS"), "parking brussels")
        self.assertEqual(normalize_name("Parking Brussels"), "parking brussels")
        self.assertEqual(normalize_name("Parking-Brussels"), "parking brussels")

    def test_case_and_accent_insensitive(self):
        self.assertEqual(normalize_name("Café ASBL"), normalize_name("cafe"))
        self.assertEqual(normalize_name("Café ASBL"), "cafe")
        self.assertEqual(normalize_name("Dvořák"), "dvorak")

    def test_separators_become_spaces(self):
        self.assertEqual(normalize_name("Théâtre/Vlaams_Huis|Test"), "theatre vlaams huis test")

    def test_other_symbols_become_spaces(self):
        self.assertEqual(normalize_name("L'Atelier"), "l atelier")
        self.assertEqual(normalize_name("Art & Culture"), "art culture")

    def test_strips_trailing_legal_form_only(self):
        self.assertEqual(normalize_name("Parking Brussels SA"), "parking brussels")
        self.assertEqual(normalize_name("De Kriekelaar vzw"), "kriekelaar")
        self.assertEqual(normalize_name("SA Lessive asbl"), "sa lessive")

    def test_lone_legal_form_is_kept(self):
        self.assertEqual(normalize_name("asbl"), "asbl")
        self.assertEqual(normalize_name("ASBL"), "asbl")

    def test_stacked_legal_forms(self):
        self.assertEqual(normalize_name("Foo scrl sa"), "foo")

    def test_legal_form_exposed_by_stopword_removal(self):
        self.assertEqual(normalize_name("Foo asbl de"), "foo")
        self.assertEqual(normalize_name(normalize_name("Foo asbl de")), "foo")
        self.assertEqual(normalize_for_detection("Foo asbl de"), "foo asbl de")

    def test_removes_stopwords(self):
        self.assertEqual(normalize_name("Maison de la Culture"), "maison culture")
        self.assertEqual(normalize_name("The House of Arts and Crafts"), "house arts crafts")

    def test_collapses_whitespace(self):
        self.assertEqual(normalize_name("  Too   Many    Spaces  "), "too many spaces")

    def test_empty_and_invalid_inputs(self):
        self.assertEqual(normalize_name(""), "")
        self.assertEqual(normalize_name("   "), "")
        self.assertEqual(normalize_name("***"), "")
        self.assertEqual(normalize_name(None), "")
        self.assertEqual(normalize_name(42), "")

    def test_only_stopwords_normalize_to_nothing(self):
        self.assertEqual(normalize_name("de la"), "")

    def test_idempotent(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                once = normalize_name(sample)
                self.assertEqual(normalize_name(once), once)

    def test_output_alphabet(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                value = normalize_name(sample)
                self.assertRegex(value, r"^[a-z0-9 ]*$")
                self.assertNotIn("  ", value)


class TestNormalizeForDetection(unittest.TestCase):
    def test_keeps_stopwords(self):
        self.assertEqual(normalize_for_detection("Maison de la Culture asbl"), "maison de la culture")

    def test_strips_legal_form(self):
        self.assertEqual(normalize_for_detection("Hangar Maritime asbl"), "hangar maritime")

    def test_otherwise_matches_grouping_key(self):
        self.assertEqual(normalize_for_detection("parking.brussels"), normalize_name("parking.brussels"))

    def test_invalid_input(self):
        self.assertEqual(normalize_for_detection(None), "")

    def test_idempotent(self):
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                once = normalize_for_detection(sample)
                self.assertEqual(normalize_for_detection(once), once)


class TestHelpers(unittest.TestCase):
    def test_strip_diacritics(self):
        self.assertEqual(strip_diacritics("éàüç"), "eauc")

    def test_significant_words(self):
        self.assertEqual(significant_words("maison de la culture"), ["maison", "culture"])
        self.assertEqual(significant_words("ab cd"), [])
        self.assertEqual(significant_words(""), [])


if __name__ == "__main__":
    unittest.main()
