"""
Unit tests for the pitch space, scale catalog and scale engine.
"""
import unittest

from notewheel.errors import InvalidNote, UnknownScaleType
from notewheel.theory.note_utils import (
    NOTE_NAMES,
    fifth_of,
    fifths_from,
    index_to_name,
    normalize_note_name,
    note_to_index,
    transpose,
)
from notewheel.theory.scale import Scale
from notewheel.theory.scales import get_scale_names, parent_major_of, pattern_for


class TestPitchSpace(unittest.TestCase):

    def test_table_is_a_bijection(self):
        for name in NOTE_NAMES:
            self.assertEqual(index_to_name(note_to_index(name)), name)
        self.assertEqual(sorted(note_to_index(n) for n in NOTE_NAMES), list(range(12)))

    def test_a_is_zero(self):
        self.assertEqual(note_to_index("A"), 0)
        self.assertEqual(note_to_index("C"), 3)
        self.assertEqual(note_to_index("G#"), 11)

    def test_invalid_names_and_indices(self):
        for bad in ["H", "Db", "c", "", None]:
            with self.assertRaises(InvalidNote):
                note_to_index(bad)
        for bad in [-1, 12, 3.0, True]:
            with self.assertRaises(InvalidNote):
                index_to_name(bad)

    def test_fifth_table(self):
        self.assertEqual(fifth_of("C"), "G")
        self.assertEqual(fifth_of("A#"), "F")
        self.assertEqual(fifth_of("D"), "A")

    def test_fifths_from_every_root_is_a_permutation(self):
        for root in NOTE_NAMES:
            walk = fifths_from(root)
            self.assertEqual(walk[0], root)
            self.assertEqual(len(walk), 12)
            self.assertEqual(set(walk), set(NOTE_NAMES))

    def test_fifths_from_c(self):
        self.assertEqual(
            fifths_from("C"),
            ["C", "G", "D", "A", "E", "B", "F#", "C#", "G#", "D#", "A#", "F"],
        )

    def test_transpose_wraps(self):
        self.assertEqual(transpose("G#", 1), "A")
        self.assertEqual(transpose("A", -3), "F#")

    def test_normalize_user_input(self):
        self.assertEqual(normalize_note_name("bb"), "A#")
        self.assertEqual(normalize_note_name(" f# "), "F#")
        with self.assertRaises(InvalidNote):
            normalize_note_name("X")


class TestScaleCatalog(unittest.TestCase):

    def test_patterns_are_well_formed(self):
        for name in get_scale_names():
            p = pattern_for(name)
            self.assertEqual(p[0], 0)
            self.assertTrue(5 <= len(p) <= 7)
            self.assertEqual(p, sorted(set(p)))
            self.assertTrue(all(x < 12 for x in p))

    def test_unknown_scale(self):
        with self.assertRaises(UnknownScaleType):
            pattern_for("Bebop")

    def test_aliases(self):
        self.assertEqual(pattern_for("Minor Pent."), [0, 3, 5, 7, 10])

    def test_parent_major(self):
        self.assertEqual(parent_major_of("D", "Dorian"), "C")
        self.assertEqual(parent_major_of("E", "Phrygian"), "C")
        self.assertEqual(parent_major_of("B", "Locrian"), "C")
        self.assertEqual(parent_major_of("A", "Aeolian"), "C")

    def test_parent_major_none_for_tonic_forms(self):
        self.assertIsNone(parent_major_of("C", "Ionian"))
        self.assertIsNone(parent_major_of("C", "Major"))
        self.assertIsNone(parent_major_of("A", "Blues"))


class TestScaleEngine(unittest.TestCase):

    def test_membership_count_matches_pattern(self):
        for root in NOTE_NAMES:
            for name in get_scale_names():
                scale = Scale(root, name)
                members = [n for n in NOTE_NAMES if scale.is_in_scale(n)]
                self.assertEqual(len(members), len(pattern_for(name)))

    def test_degree_of_inverts_note_for_degree(self):
        scale = Scale("F#", "Dorian")
        for d in range(1, scale.size + 1):
            self.assertEqual(scale.degree_of(scale.note_for_degree(d)), d)
        for note in NOTE_NAMES:
            d = scale.degree_of(note)
            if d is not None:
                self.assertEqual(scale.note_for_degree(d), note)

    def test_c_major_notes(self):
        self.assertEqual(Scale("C", "Major").notes(), ["C", "D", "E", "F", "G", "A", "B"])
        self.assertFalse(Scale("C", "Major").is_in_scale("C#"))
        self.assertIsNone(Scale("C", "Major").degree_of("F#"))

    def test_degree_wraps_on_pentatonic(self):
        scale = Scale("C", "Major Pentatonic")
        self.assertEqual(scale.note_for_degree(9), scale.note_for_degree(4))
        self.assertEqual(scale.note_for_degree(9), "G")
        self.assertEqual(scale.note_for_degree(6), "C")

    def test_chromatic_offset_ignores_scale(self):
        scale = Scale("G", "Minor Pentatonic")
        self.assertEqual(scale.note_for_chromatic_offset(0), "G")
        self.assertEqual(scale.note_for_chromatic_offset(1), "G#")
        self.assertEqual(scale.note_for_chromatic_offset(13), "G#")

    def test_relative_key(self):
        self.assertEqual(Scale("C", "Major").relative_key(), "A")
        self.assertEqual(Scale("A", "Minor").relative_key(), "C")
        self.assertEqual(Scale("G", "Mixolydian").relative_key(), "E")
        self.assertEqual(Scale("E", "Blues").relative_key(), "G")

    def test_chord_quality_in_c_major(self):
        scale = Scale("C", "Major")
        qualities = [scale.chord_quality_for_degree(d) for d in range(1, 8)]
        self.assertEqual(qualities, ["", "m", "m", "", "", "m", "dim"])

    def test_chord_quality_in_minor(self):
        scale = Scale("A", "Minor")
        qualities = [scale.chord_quality_for_degree(d) for d in range(1, 8)]
        self.assertEqual(qualities, ["m", "dim", "", "m", "m", "", ""])

    def test_chord_quality_outside_seven_note_scales(self):
        for name in ("Major Pentatonic", "Minor Pentatonic"):
            scale = Scale("C", name)
            qualities = [scale.chord_quality_for_degree(d) for d in range(1, 6)]
            self.assertEqual(qualities, [""] * 5, name)
        blues = Scale("C", "Blues")
        qualities = [blues.chord_quality_for_degree(d) for d in range(1, 7)]
        self.assertEqual(qualities, ["", "m", "", "", "", ""])

    def test_chord_quality_wraps_degree(self):
        pent = Scale("C", "Minor Pentatonic")
        self.assertEqual(pent.chord_for_degree(7).root_name, "D#")
        self.assertEqual(Scale("C", "Major").chord_quality_for_degree(9), "m")

    def test_diatonic_chords(self):
        chords = Scale("C", "Major").diatonic_chords()
        self.assertEqual([c.name for c in chords], ["C", "Dm", "Em", "F", "G", "Am", "Bdim"])
        self.assertEqual([c.to_symbol() for c in chords], ["I", "ii", "iii", "IV", "V", "vi", "vii°"])

    def test_set_scale_is_atomic_on_error(self):
        scale = Scale("D", "Dorian")
        with self.assertRaises(UnknownScaleType):
            scale.set_scale("E", "Nope")
        with self.assertRaises(InvalidNote):
            scale.set_scale("Q", "Major")
        self.assertEqual(scale.display_name, "D Dorian")
        self.assertEqual(scale.notes()[0], "D")

    def test_note_info(self):
        scale = Scale("C", "Major")
        info = scale.note_info("E")
        self.assertTrue(info.in_scale)
        self.assertEqual(info.degree, 3)
        self.assertEqual(info.degree_name, "Mediant")
        self.assertEqual(scale.note_info("B").degree_name, "Leading Tone")
        self.assertEqual(Scale("A", "Minor").note_info("G").degree_name, "Subtonic")
        outside = scale.note_info("C#")
        self.assertFalse(outside.in_scale)
        self.assertIsNone(outside.degree)


if __name__ == "__main__":
    unittest.main()
