import unittest

from app.masonrygrid.layout.breakpoints import BreakpointTable
from app.masonrygrid.layout.controller import LayoutController
from app.masonrygrid.layout.distribute import summed_heights
from app.masonrygrid.layout.options import MasonryConfig, MasonryOptions, Strategy
from fakes import FakeClock, FakeScheduler

TABLE = BreakpointTable(default=3, thresholds={100: 1, 300: 2})


class WidthSource:
    """Stands in for a window-level resize listener registry."""

    def __init__(self) -> None:
        self.listeners = []

    def subscribe(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def emit(self, width: float) -> None:
        for callback in list(self.listeners):
            callback(width)


class TestLayoutController(unittest.TestCase):
    def setUp(self) -> None:
        self.items = [f"item-{i}" for i in range(7)]
        self.rendered = []
        self.clock = FakeClock()
        self.scheduler = FakeScheduler(self.clock)

    def make(self, options: MasonryOptions = MasonryOptions(), **kwargs) -> LayoutController:
        config = MasonryConfig(breakpoints=TABLE, options=options, throttle_window_s=0.2)
        return LayoutController(
            self.items,
            config,
            self.rendered.append,
            schedule=self.scheduler,
            clock=self.clock,
            **kwargs,
        )

    def test_start_renders_initial_layout(self):
        controller = self.make()
        self.assertIsNone(controller.state)
        self.assertFalse(controller.initialized)

        state = controller.start(250)
        self.assertEqual(controller.column_count, 2)
        self.assertEqual(self.rendered, [state])
        self.assertEqual(state.columns[0], ("item-0", "item-2", "item-4", "item-6"))
        self.assertTrue(controller.initialized)

    def test_same_column_count_is_a_no_op(self):
        controller = self.make()
        controller.start(250)
        self.assertFalse(controller.handle_width(280))
        self.assertFalse(controller.handle_width(300))
        self.assertEqual(len(self.rendered), 1)

    def test_changed_column_count_rebuilds_from_scratch(self):
        controller = self.make()
        controller.start(250)
        self.assertTrue(controller.handle_width(500))
        self.assertEqual(controller.column_count, 3)
        self.assertEqual(len(self.rendered), 2)
        self.assertEqual(
            self.rendered[-1].as_mapping(),
            {0: ["item-0", "item-3", "item-6"], 1: ["item-1", "item-4"], 2: ["item-2", "item-5"]},
        )

        self.assertTrue(controller.handle_width(50))
        self.assertEqual(self.rendered[-1].columns, (tuple(self.items),))

    def test_handle_width_before_start_starts(self):
        controller = self.make()
        self.assertTrue(controller.handle_width(50))
        self.assertEqual(controller.column_count, 1)

    def test_resize_burst_is_throttled(self):
        controller = self.make()
        controller.start(250)

        controller.on_width_changed(500)  # leading edge
        self.assertEqual(controller.column_count, 3)
        for width in (480, 200, 90, 60, 120, 150, 170, 180, 260):
            self.clock.advance(0.01)
            controller.on_width_changed(width)

        self.assertEqual(len(self.rendered), 2)
        self.assertEqual(len(self.scheduler.handles), 1)

        self.scheduler.run_pending()
        # Trailing evaluation uses the last width (260 -> 2 columns).
        self.assertEqual(controller.column_count, 2)
        self.assertEqual(len(self.rendered), 3)

    def test_trailing_call_with_unchanged_count_does_not_render(self):
        controller = self.make()
        controller.start(250)
        controller.on_width_changed(500)
        controller.on_width_changed(700)
        self.scheduler.run_pending()
        self.assertEqual(len(self.rendered), 2)

    def test_strategy_from_options(self):
        self.assertIs(self.make().strategy, Strategy.SEQUENTIAL)
        self.assertIs(self.make(MasonryOptions(horizontal_order=True)).strategy, Strategy.FEWEST_ITEMS)

    def test_shortest_height_uses_provider(self):
        heights = {"item-0": 300, "item-1": 50, "item-2": 50}
        self.items = list(heights)
        controller = self.make(
            MasonryOptions(sort_by_height=True),
            column_height=summed_heights(heights.__getitem__),
        )
        state = controller.start(250)
        self.assertEqual(state.columns, (("item-0",), ("item-1", "item-2")))

    def test_shortest_height_without_provider_rejected(self):
        with self.assertRaises(ValueError):
            self.make(MasonryOptions(sort_by_height=True))

    def test_empty_items(self):
        self.items = []
        state = self.make().start(500)
        self.assertEqual(state.columns, ((), (), ()))

    def test_initialized_is_false_while_rendering(self):
        observed = []
        config = MasonryConfig(breakpoints=TABLE)
        controller = LayoutController(
            self.items,
            config,
            lambda state: observed.append(controller.initialized),
            schedule=self.scheduler,
        )
        controller.start(250)
        self.assertEqual(observed, [False])
        self.assertTrue(controller.initialized)

    def test_failed_render_is_retried_on_next_width(self):
        attempts = []

        def flaky_render(state):
            attempts.append(state.column_count)
            if len(attempts) == 2:
                raise RuntimeError("widget gone")

        config = MasonryConfig(breakpoints=TABLE)
        controller = LayoutController(self.items, config, flaky_render, schedule=self.scheduler)
        controller.start(250)

        with self.assertRaises(RuntimeError):
            controller.handle_width(500)
        self.assertEqual(controller.column_count, 2)
        self.assertFalse(controller.initialized)

        # Same target count as the failed render: must not be treated as a no-op.
        self.assertTrue(controller.handle_width(600))
        self.assertEqual(controller.column_count, 3)
        self.assertEqual(attempts, [2, 3, 3])
        self.assertTrue(controller.initialized)

    def test_malformed_breakpoints_fall_back_to_two_columns(self):
        with self.assertLogs("app.masonrygrid.layout.breakpoints", level="ERROR"):
            config = MasonryConfig(breakpoints="{oops")
        controller = LayoutController(self.items, config, self.rendered.append, schedule=self.scheduler)
        self.assertEqual(controller.start(50).column_count, 2)

    def test_debug_logging(self):
        controller = self.make(MasonryOptions(debug=True))
        with self.assertLogs("app.masonrygrid.layout.controller", level="DEBUG") as logs:
            controller.start(250)
            controller.handle_width(500)
        output = "\n".join(logs.output)
        self.assertIn("Parsed breakpoints", output)
        self.assertIn("changing column count from 2 to 3", output)


class TestControllerLifecycle(unittest.TestCase):
    def setUp(self) -> None:
        self.rendered = []
        self.clock = FakeClock()
        self.scheduler = FakeScheduler(self.clock)
        self.source = WidthSource()
        self.controller = LayoutController(
            ["a", "b", "c"],
            MasonryConfig(breakpoints=TABLE),
            self.rendered.append,
            schedule=self.scheduler,
            clock=self.clock,
        )

    def test_attach_routes_width_signals(self):
        self.controller.start(250)
        self.controller.attach(self.source.subscribe)
        self.source.emit(50)
        self.assertEqual(self.controller.column_count, 1)

    def test_attach_twice_rejected(self):
        self.controller.attach(self.source.subscribe)
        with self.assertRaises(RuntimeError):
            self.controller.attach(self.source.subscribe)

    def test_close_releases_subscription_and_pending_work(self):
        self.controller.start(250)
        self.controller.attach(self.source.subscribe)
        self.source.emit(500)
        self.source.emit(50)
        self.assertEqual(len(self.scheduler.live), 1)

        self.controller.close()
        self.assertEqual(self.source.listeners, [])
        self.assertEqual(self.scheduler.live, [])
        self.assertEqual(self.controller.column_count, 3)

        self.controller.on_width_changed(50)  # ignored once closed
        with self.assertRaises(RuntimeError):
            self.controller.handle_width(50)
        self.controller.close()  # idempotent

    def test_context_manager(self):
        with self.controller as controller:
            controller.attach(self.source.subscribe)
            controller.start(250)
        self.assertEqual(self.source.listeners, [])
        with self.assertRaises(RuntimeError):
            self.controller.start(250)


if __name__ == "__main__":
    unittest.main()
