"""
End-to-end behaviour of one ExplorerSession with mocked audio and time.
"""
import threading
import unittest

from notewheel.app.events import Event
from notewheel.app.scheduler import ManualScheduler
from notewheel.app.session import ExplorerSession
from notewheel.app.sounding import KEYBOARD, MOUSE
from notewheel.config.config import validate_config
from notewheel.errors import MalformedSequence

from .mock_audio import make_bank, triggered_notes


def make_session(**context):
    cfg = validate_config({"audio": {"backend": "silent"}, "context": dict(context)})
    bank, backend = make_bank()
    sched = ManualScheduler()
    return ExplorerSession(cfg, bank=bank, scheduler=sched), backend, sched


class TestKeyboardAndMouse(unittest.TestCase):

    def setUp(self):
        self.session, self.backend, self.sched = make_session()

    def test_scale_row_plays_degrees(self):
        self.assertEqual(self.session.key_pressed("q"), "C")
        self.assertEqual(self.session.key_pressed("e"), "E")
        self.assertEqual(self.session.key_pressed("i"), "C")
        self.assertEqual(self.session.sounding.notes(), ["C", "E"])
        self.assertEqual(triggered_notes(self.backend), ["C", "E"])

    def test_number_row_plays_chromatic_offsets(self):
        self.assertEqual(self.session.key_pressed("2"), "C#")
        self.assertEqual(self.session.key_pressed("="), "B")
        self.assertIsNone(self.session.key_pressed("z"))

    def test_key_release_respects_other_owners(self):
        self.session.toggle_note("C")
        self.session.key_pressed("q")
        self.session.key_released("q")
        self.assertEqual(self.session.sounding.owners("C"), {MOUSE})
        self.assertEqual(self.backend.released, [])

    def test_mouse_toggle(self):
        self.assertTrue(self.session.toggle_note("G"))
        self.assertIn("G", self.session.sounding)
        self.assertFalse(self.session.toggle_note("G"))
        self.assertNotIn("G", self.session.sounding)
        self.assertEqual(len(self.backend.released), 1)

    def test_note_events(self):
        seen = []
        self.session.events.subscribe(Event.NOTE_ON, seen.append)
        self.session.key_pressed("w")
        self.assertEqual(seen, [{"note": "D", "source": KEYBOARD}])


class TestStatusAndInfo(unittest.TestCase):

    def test_status_line(self):
        session, _, _ = make_session()
        self.assertEqual(session.status_line(), "Equal Tempered | C Major | No notes playing")
        for note in ("C", "E", "G"):
            session.toggle_note(note)
        self.assertEqual(session.status_line(), "Equal Tempered | C Major | C (C, E, G)")

    def test_status_line_note_list_and_mode(self):
        session, _, _ = make_session(root="D", scale="Dorian")
        session.toggle_note("D")
        session.toggle_note("A")
        self.assertEqual(
            session.status_line(),
            "Equal Tempered | D Dorian (Mode of C Major) | D, A",
        )
        self.assertEqual(session.scale_info(), "Mode of C Major")

    def test_scale_info_empty_for_tonic_forms(self):
        session, _, _ = make_session()
        self.assertEqual(session.scale_info(), "")
        session.set_scale("A", "Aeolian")
        self.assertEqual(session.scale_info(), "Mode of C Major")

    def test_snapshot(self):
        session, _, _ = make_session()
        session.set_progression("2-5-1")
        session.toggle_note("C")
        snap = session.snapshot()
        self.assertEqual(snap["in_scale"], ["C", "D", "E", "F", "G", "A", "B"])
        self.assertEqual(snap["sounding"], ["C"])
        self.assertEqual(snap["progression"], "1/3: Dm (ii)")
        self.assertFalse(snap["fifths"])

    def test_scale_change_event(self):
        session, _, _ = make_session()
        seen = []
        session.events.subscribe(Event.SCALE_CHANGED, seen.append)
        session.set_scale("E", "Phrygian")
        self.assertEqual(seen[0]["info"], "Mode of C Major")


class TestPlaybackCoordination(unittest.TestCase):

    def setUp(self):
        self.session, self.backend, self.sched = make_session()

    def test_malformed_demo_is_ignored(self):
        with self.assertLogs("notewheel.app.session", level="WARNING"):
            self.assertIsNone(self.session.play_demo("|C|soon"))
        self.assertEqual(self.session.scale.display_name, "C Major")
        self.assertIsNotNone(self.session.play_demo("|C|100"))

    def test_malformed_demo_keeps_running_playback(self):
        first = self.session.play_sequence("|C+E+G|1000")
        with self.assertLogs("notewheel.app.session", level="WARNING"):
            self.assertIsNone(self.session.play_demo("|C|soon"))
            self.assertIsNone(self.session.play_demo("C+E+G"))
        self.assertFalse(first.cancelled)
        self.assertEqual(self.session.sounding.notes(), ["C", "E", "G"])

    def test_malformed_demo_keeps_progression_playing(self):
        self.session.set_progression("1-4-5-1")
        self.session.start_progression_playback()
        with self.assertLogs("notewheel.app.session", level="WARNING"):
            self.session.play_demo("Pythagorean,C,Bebop|C")
        self.assertTrue(self.session.progression_player.is_playing)
        self.assertEqual(self.session.sounding.notes(), ["C", "E", "G"])

    def test_play_sequence_raises(self):
        with self.assertRaises(MalformedSequence):
            self.session.play_sequence("a|b|c|d")

    def test_url_demo(self):
        handle = self.session.play_url_demo("demo=Pythagorean%2CG%23%7C1%2B5%7C1000")
        self.assertIsNotNone(handle)
        self.assertEqual(self.session.bank.name, "Pythagorean")
        self.assertEqual(self.session.sounding.notes(), ["G#", "D#"])
        self.assertIsNone(self.session.play_url_demo("x=1"))
        with self.assertLogs("notewheel.app.session", level="WARNING"):
            self.assertIsNone(self.session.play_url_demo("demo=%7CC%2B%2BE"))

    def test_sequence_stops_progression(self):
        self.session.set_progression("1-4-5-1")
        self.session.start_progression_playback()
        self.assertTrue(self.session.progression_player.is_playing)
        self.session.play_sequence("|A|1000")
        self.assertFalse(self.session.progression_player.is_playing)
        self.assertEqual(self.session.sounding.notes(), ["A"])

    def test_progression_stops_sequence(self):
        handle = self.session.play_sequence("|A|1000")
        self.session.set_progression("1-4-5-1")
        self.session.start_progression_playback()
        self.assertTrue(handle.cancelled)
        self.assertEqual(self.session.sounding.notes(), ["C", "E", "G"])

    def test_manual_step_replays_while_playing(self):
        self.session.set_progression("1-4-5-1")
        self.session.start_progression_playback()
        self.session.next_chord()
        self.assertEqual(self.session.sounding.notes(), ["F", "A", "C"])
        self.session.previous_chord()
        self.assertEqual(self.session.sounding.notes(), ["C", "E", "G"])

    def test_detected_chords_follow_sounding(self):
        self.session.play_sequence("|C+E+G+A#|1000")
        self.assertIn("C7", self.session.detected_chords())
        self.sched.run_until_idle()
        self.assertEqual(self.session.detected_chords(), {})

    def test_reset(self):
        self.session.set_scale("F#", "Locrian")
        self.session.set_progression("2-5-1")
        self.session.start_progression_playback()
        self.session.toggle_note("B")
        self.session.display.fifths = True
        self.session.reset()
        self.assertEqual(self.session.scale.display_name, "C Major")
        self.assertFalse(self.session.progression.is_active)
        self.assertFalse(self.session.progression_player.is_playing)
        self.assertEqual(len(self.session.sounding), 0)
        self.assertFalse(self.session.display.fifths)
        self.assertEqual(self.sched.pending_count(), 0)

    def test_independent_sessions(self):
        other, _, _ = make_session(root="G")
        self.session.toggle_note("C")
        self.assertEqual(other.scale.root_name, "G")
        self.assertEqual(len(other.sounding), 0)

    def test_entry_points_hold_scheduler_lock(self):
        held = []
        original = self.session.bank.play_note

        def lock_free_elsewhere():
            got = self.sched.lock.acquire(blocking=False)
            if got:
                self.sched.lock.release()
            return got

        def play_note(note):
            result = []
            t = threading.Thread(target=lambda: result.append(lock_free_elsewhere()))
            t.start()
            t.join()
            held.append(not result[0])
            original(note)

        self.session.bank.play_note = play_note
        self.session.key_pressed("q")
        self.session.play_sequence("|E|100")
        self.assertEqual(held, [True, True])

    def test_close(self):
        self.session.play_sequence("|C|1000")
        self.session.close()
        self.assertTrue(self.backend.closed)
        self.assertEqual(len(self.session.sounding), 0)


if __name__ == "__main__":
    unittest.main()
