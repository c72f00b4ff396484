import unittest

from mealprep.domain.GroceryList import GroceryList, GroceryListItem
from mealprep.events.Event_Bus import EventBus, GROCERY_GENERATED, GROCERY_UNIT_MISMATCH, MENU_SAVED
from mealprep.events.event_helpers import publish_grocery_generated
from mealprep.events.web_observers import EventLog


class TestEventBus(unittest.TestCase):

    def test_failing_subscriber_does_not_break_publish(self):
        bus = EventBus()
        received = []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe(MENU_SAVED, broken)
        bus.subscribe(MENU_SAVED, lambda name, payload: received.append(payload))
        bus.publish(MENU_SAVED, {"label": "x"})
        self.assertEqual(received, [{"label": "x"}])

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        callback = lambda name, payload: received.append(name)  # noqa: E731
        bus.subscribe(MENU_SAVED, callback)
        bus.unsubscribe(MENU_SAVED, callback)
        bus.unsubscribe(MENU_SAVED, callback)
        bus.publish(MENU_SAVED)
        self.assertEqual(received, [])


class TestEventLog(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.log = EventLog(max_events=3).start(self.bus)

    def test_start_is_idempotent(self):
        self.log.start(self.bus)
        self.bus.publish(MENU_SAVED, {"label": "a", "slug": "a"})
        self.assertEqual(len(self.log.get_events()["events"]), 1)

    def test_cursor_and_cap(self):
        for i in range(5):
            self.bus.publish(MENU_SAVED, {"label": str(i), "slug": str(i)})
        snapshot = self.log.get_events()
        self.assertEqual([e["label"] for e in snapshot["events"]], ["2", "3", "4"])
        self.assertEqual(snapshot["next_cursor"], 5)
        self.assertEqual([e["id"] for e in self.log.get_events(since=4)["events"]], [5])
        self.assertEqual(self.log.get_events(since=5)["events"], [])

    def test_unit_mismatch_event(self):
        item = GroceryListItem("lemon", "Lemon", "Produce", 2, "ea", unit_mismatch=True,
                               other_quantities=(("g", 250),))
        publish_grocery_generated(self.bus, GroceryList.of([item], ["r1", "r5"]), 4)
        types = [e["type"] for e in self.log.get_events()["events"]]
        self.assertEqual(types, [GROCERY_GENERATED, GROCERY_UNIT_MISMATCH])
        mismatch = self.log.get_events()["events"][-1]
        self.assertEqual(mismatch["other_units"], ["g"])
        self.assertEqual(mismatch["name"], "Lemon")


if __name__ == "__main__":
    unittest.main()
