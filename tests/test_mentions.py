"""
Unit tests for subsidy_links.core.identity.mentions.

Tests all detection strategies:
- Exact, word-bounded phrase
- All significant words present
- Quoted name
- MentionDetector integration
"""

import unittest

from subsidy_links.core.identity.mentions import (
    MentionDetector,
    compile_target,
    fold_text,
    match_all_words,
    match_exact,
    match_quoted,
    mentions,
)


class TestMatchExact(unittest.TestCase):
    def test_whole_word_match(self):
        result = match_exact("Festival d'Art contemporain", compile_target("Art"))
        self.assertTrue(result.matches)
        self.assertEqual(result.strategy, "exact")

    def test_no_match_inside_word(self):
        self.assertFalse(match_exact("Aide aux particuliers", compile_target("Art")).matches)

    def test_case_insensitive(self):
        self.assertTrue(match_exact("soutien à port associatif", compile_target("Port Associatif")).matches)


class TestMatchAllWords(unittest.TestCase):
    def test_words_present_in_any_order(self):
        target = compile_target("Hangar Maritime asbl")
        result = match_all_words(fold_text("Projet Maritime avec le Hangar"), target)
        self.assertTrue(result.matches)
        self.assertEqual(result.strategy, "all_words")

    def test_missing_word(self):
        target = compile_target("Hangar Maritime asbl")
        self.assertFalse(match_all_words(fold_text("Projet avec le Hangar"), target).matches)

    def test_not_used_when_normalization_changes_nothing(self):
        target = compile_target("hangar maritime")
        self.assertEqual(target.words, ())
        self.assertFalse(match_all_words(fold_text("maritime hangar"), target).matches)

    def test_short_words_are_ignored(self):
        target = compile_target("Le Hangar de la Mer asbl")
        self.assertTrue(match_all_words(fold_text("Fête au hangar, vue sur mer"), target).matches)


class TestMatchQuoted(unittest.TestCase):
    def test_double_quotes(self):
        result = match_quoted('Projet "Hangar Maritime" 2023', compile_target("Hangar Maritime"))
        self.assertTrue(result.matches)
        self.assertEqual(result.strategy, "quoted")

    def test_single_quotes(self):
        self.assertTrue(match_quoted("Projet 'hangar maritime'", compile_target("Hangar Maritime")).matches)

    def test_unquoted(self):
        self.assertFalse(match_quoted("Projet Hangar Maritime", compile_target("Hangar Maritime")).matches)


class TestMentionDetector(unittest.TestCase):
    def setUp(self):
        self.detector = MentionDetector()

    def test_no_false_positive_on_substring(self):
        self.assertFalse(self.detector.mentions("Support technique", "Art"))
        self.assertFalse(self.detector.mentions("Aide aux particuliers", "Art"))

    def test_word_bounded_short_name(self):
        self.assertTrue(self.detector.mentions("Festival d'Art contemporain", "Art"))

    def test_name_with_legal_form_found_by_words(self):
        result = self.detector.detect(
            "Soutien au festival organisé avec Hangar Maritime", "Hangar Maritime asbl"
        )
        self.assertTrue(result.matches)
        self.assertEqual(result.strategy, "all_words")

    def test_exact_wins_first(self):
        result = self.detector.detect("Soutien à Hangar Maritime asbl", "Hangar Maritime asbl")
        self.assertEqual(result.strategy, "exact")

    def test_accents_do_not_block_word_match(self):
        self.assertTrue(self.detector.mentions("Spectacle au Théâtre de Poche", "Theatre de Poche asbl"))

    def test_punctuated_name(self):
        self.assertTrue(self.detector.mentions("Convention avec Parking Brussels", "parking.brussels"))

    def test_unrelated_text(self):
        self.assertFalse(self.detector.mentions("Fonctionnement", "Hangar Maritime asbl"))

    def test_empty_inputs(self):
        self.assertFalse(self.detector.mentions("", "Art"))
        self.assertFalse(self.detector.mentions(None, "Art"))
        self.assertFalse(self.detector.mentions("Festival d'Art", ""))
        self.assertFalse(self.detector.mentions("Festival d'Art", None))

    def test_name_without_usable_characters(self):
        result = self.detector.detect("Projet ***", "***")
        self.assertFalse(result.matches)

    def test_module_function(self):
        self.assertTrue(mentions("Festival d'Art contemporain", "Art"))
        self.assertFalse(mentions("Support technique", "Art"))


if __name__ == "__main__":
    unittest.main()
