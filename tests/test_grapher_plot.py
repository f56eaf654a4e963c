from __future__ import annotations

import contextlib
import io
import math
from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from grapher_core import AxisConfig, Measures, with_measures
from grapher_plot import FrameRenderer, Graph, InputGrid, Navigator, PlotDataError, RenderStyle, evaluate, save_png
from grapher_plot.cli import build_parser, main
from grapher_plot.raster import draw_dotted_hline, draw_dotted_vline, draw_text, new_canvas, text_size
from grapher_plot.render import format_ruler_value, ruler_color


class GraphTests(unittest.TestCase):
    def test_failed_evaluation_is_undefined(self) -> None:
        self.assertTrue(math.isnan(evaluate(lambda x: 1 / x, 0.0)))
        self.assertTrue(math.isnan(evaluate(math.sqrt, -1.0)))
        self.assertTrue(math.isnan(evaluate(lambda x: 1j, 1.0)))
        self.assertEqual(evaluate(lambda x: 2 * x, 3.0), 6.0)

    def test_graph_validation(self) -> None:
        with self.assertRaises(PlotDataError):
            Graph(calculate=5)  # type: ignore[arg-type]
        with self.assertRaises(PlotDataError):
            Graph(calculate=abs, kind="bar")  # type: ignore[arg-type]
        with self.assertRaises(PlotDataError):
            Graph(calculate=abs, color=(1, 2, 3))  # type: ignore[arg-type]

    def test_samples_are_cached_per_grid_version(self) -> None:
        calls: list[float] = []

        def record(x: float) -> float:
            calls.append(x)
            return x

        graph = Graph(calculate=record)
        grid = InputGrid(version=0, values=np.asarray([0.0, 0.5, 1.0]))
        first = graph.samples(grid)
        self.assertEqual(len(calls), 3)
        self.assertIs(graph.samples(grid), first)
        self.assertEqual(len(calls), 3)
        graph.samples(InputGrid(version=1, values=grid.values))
        self.assertEqual(len(calls), 6)

    def test_integer_graph_samples_each_integer_once(self) -> None:
        graph = Graph(calculate=lambda x: x * 10, kind="integer")
        grid = InputGrid(version=0, values=np.asarray([0.0, 0.2, 0.9, 1.0, 1.5, 2.0]))
        samples = graph.samples(grid)
        self.assertEqual(samples.view_x.tolist(), [0, 3, 5])
        self.assertEqual(samples.outs.tolist(), [0.0, 10.0, 20.0])

    def test_input_grid_follows_axis(self) -> None:
        axis = with_measures(
            AxisConfig.from_view_area_size(100),
            Measures(min_value=-5.0, max_value=5.0, min_value_limit=-5.0, max_value_limit=5.0),
        )
        grid = InputGrid.from_axis(axis, version=3)
        self.assertEqual(grid.version, 3)
        self.assertEqual(grid.values.shape, (100,))
        self.assertAlmostEqual(grid.values[0], -5.0, delta=1e-9)
        self.assertAlmostEqual(grid.values[-1], 5.0, delta=1e-9)
        self.assertTrue(np.all(np.diff(grid.values) > 0))

    def test_input_grid_of_default_axis_starts_at_minus_infinity(self) -> None:
        grid = InputGrid.from_axis(AxisConfig.from_view_area_size(100), version=0)
        self.assertEqual(grid.values[0], -math.inf)
        self.assertFalse(np.any(np.isnan(grid.values)))


class NavigatorTests(unittest.TestCase):
    def test_view_area_excludes_padding(self) -> None:
        nav = Navigator(220, 120)
        self.assertEqual(nav.axis_x.view_area_size, 200)
        self.assertEqual(nav.axis_y.view_area_size, 100)
        self.assertEqual(nav.native_to_view_y(nav.height - nav.padding - 1), 0)
        self.assertEqual(nav.view_to_native_y(0), 109)
        self.assertEqual(nav.native_to_view_x(nav.view_to_native_x(37)), 37)

    def test_rejects_tiny_surface(self) -> None:
        with self.assertRaises(PlotDataError):
            Navigator(5, 5)
        nav = Navigator(220, 120)
        with self.assertRaises(PlotDataError):
            nav.resize(5, 5)

    def test_zoom_in_then_reset(self) -> None:
        nav = Navigator(220, 120)
        initial_x, initial_y = nav.axis_x, nav.axis_y
        self.assertTrue(nav.zoom(True, native_x=110, native_y=60))
        self.assertLess(nav.axis_x.min_coord, 0)
        self.assertNotEqual(nav.axis_y, initial_y)
        self.assertEqual(nav.grid.version, 1)

        self.assertTrue(nav.reset())
        self.assertEqual(nav.axis_x, initial_x)
        self.assertEqual(nav.axis_y, initial_y)
        self.assertFalse(nav.reset())

    def test_zoom_out_of_full_view_is_a_no_op(self) -> None:
        nav = Navigator(220, 120)
        self.assertFalse(nav.zoom(False, native_x=110, native_y=60))
        self.assertFalse(nav.zoom(True))

    def test_set_as_default_pins_the_window(self) -> None:
        nav = Navigator(220, 120)
        nav.zoom(True, smooth=True, native_x=80)
        zoomed = nav.axis_x
        self.assertTrue(nav.set_as_default())
        self.assertFalse(nav.set_as_default())
        self.assertFalse(nav.reset())
        self.assertEqual(nav.axis_x.currents, zoomed.currents)

    def test_zoom_out_stops_at_the_limits(self) -> None:
        nav = Navigator(220, 120)
        nav.set_measures(x=Measures(min_value=-10.0, max_value=10.0, min_value_limit=-100.0, max_value_limit=100.0))
        for _ in range(20):
            if (nav.axis_x.min_value, nav.axis_x.max_value) == (-100.0, 100.0):
                break
            self.assertTrue(nav.zoom(False, native_x=110))
        self.assertEqual((nav.axis_x.min_value, nav.axis_x.max_value), (-100.0, 100.0))
        version = nav.grid.version
        self.assertFalse(nav.zoom(False, native_x=110))
        self.assertEqual(nav.grid.version, version)

    def test_move_drags_content(self) -> None:
        nav = Navigator(220, 120)
        self.assertFalse(nav.move(10, 0))
        self.assertFalse(nav.move(0, 0))

        nav.zoom(True, native_x=110, native_y=60)
        value = nav.axis_x.coord_to_value(50.0)
        self.assertTrue(nav.move(10, 0))
        self.assertEqual(nav.axis_x.value_to_view_coord(value), 60)

    def test_directional_moves_report_changes(self) -> None:
        nav = Navigator(220, 120)
        nav.zoom(True, native_x=110, native_y=60)
        self.assertTrue(nav.move_left())
        self.assertTrue(nav.move_right(smooth=True))
        self.assertTrue(nav.move_up())
        self.assertTrue(nav.move_down(smooth=True))

    def test_select_range(self) -> None:
        nav = Navigator(220, 120)
        self.assertFalse(nav.select_range(50, 50, 20, 80))
        before_y = nav.axis_y
        self.assertTrue(nav.select_range_x(60, 110))
        self.assertEqual(nav.axis_y, before_y)
        self.assertTrue(math.isfinite(nav.axis_x.min_value))
        self.assertTrue(math.isfinite(nav.axis_x.max_value))

        before_x = nav.axis_x
        self.assertTrue(nav.select_range_y(20, 50))
        self.assertEqual(nav.axis_x, before_x)

    def test_log_shifts(self) -> None:
        nav = Navigator(220, 120)
        self.assertTrue(nav.shift_max_log(1, 0))
        self.assertEqual(nav.axis_x.max_log, 7)
        self.assertTrue(nav.shift_min_log(0, -1))
        self.assertEqual(nav.axis_y.min_log, -1)
        self.assertFalse(nav.shift_min_log(0, 0))

    def test_resize_rebuilds_grid(self) -> None:
        nav = Navigator(220, 120)
        self.assertTrue(nav.resize(420, 220))
        self.assertEqual(nav.axis_x.view_area_size, 400)
        self.assertEqual(nav.axis_y.view_area_size, 200)
        self.assertEqual(nav.grid.values.shape, (400,))
        self.assertFalse(nav.resize(420, 220))

    def test_set_measures(self) -> None:
        nav = Navigator(220, 120)
        self.assertTrue(nav.set_measures(x=Measures(min_value=-1.0, max_value=1.0)))
        self.assertEqual((nav.axis_x.min_value, nav.axis_x.max_value), (-1.0, 1.0))
        self.assertFalse(nav.set_measures())


class RenderTests(unittest.TestCase):
    def test_frame_shape_and_background(self) -> None:
        nav = Navigator(160, 120)
        nav.add_graph(lambda x: x)
        frame = FrameRenderer().render(nav)
        self.assertEqual(frame.shape, (120, 160, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(tuple(int(c) for c in frame[0, 0]), (0, 0, 0, 255))
        self.assertTrue(np.any(np.all(frame[:, :, :3] == 255, axis=2)))

    def test_render_is_deterministic(self) -> None:
        nav = Navigator(160, 120)
        nav.add_integer_graph(lambda x: x * -5, (0, 255, 255, 255))
        renderer = FrameRenderer()
        self.assertTrue(np.array_equal(renderer.render(nav), renderer.render(nav)))

    def test_undefined_graph_draws_nothing(self) -> None:
        empty = Navigator(160, 120)
        failing = Navigator(160, 120)
        failing.add_graph(lambda x: 1 / 0)
        renderer = FrameRenderer()
        self.assertTrue(np.array_equal(renderer.render(empty), renderer.render(failing)))

    def test_ruler_color_scales_with_weight(self) -> None:
        style = RenderStyle()
        self.assertEqual(ruler_color(1.0, style), (64, 64, 64, 255))
        self.assertEqual(ruler_color(0.0, style), (24, 24, 24, 255))
        self.assertLess(ruler_color(0.1, style)[0], ruler_color(0.5, style)[0])

    def test_rejects_invalid_style(self) -> None:
        with self.assertRaises(PlotDataError):
            RenderStyle(ruler_gray_min=80, ruler_gray_max=40)

    def test_format_ruler_value(self) -> None:
        self.assertEqual(format_ruler_value(math.inf), "inf")
        self.assertEqual(format_ruler_value(-math.inf), "-inf")
        self.assertEqual(format_ruler_value(0.0), "0")
        self.assertEqual(format_ruler_value(0.5), "0.5")
        self.assertEqual(format_ruler_value(1e6), "1e+06")

    def test_save_png(self) -> None:
        frame = FrameRenderer().render(Navigator(160, 120))
        with tempfile.TemporaryDirectory() as tmp:
            path = save_png(frame, Path(tmp) / "nested" / "frame.png")
            with Image.open(path) as image:
                self.assertEqual(image.size, (160, 120))
        with self.assertRaises(PlotDataError):
            save_png(np.zeros((2, 2, 3), dtype=np.uint8), Path("unused.png"))


class RasterTests(unittest.TestCase):
    def test_dotted_lines_share_one_lattice(self) -> None:
        canvas = new_canvas(10, 10)
        color = (200, 200, 200, 255)
        draw_dotted_hline(canvas, 0, 9, 2, color)
        draw_dotted_hline(canvas, 0, 9, 5, color)
        draw_dotted_vline(canvas, 3, 0, 9, color)
        draw_dotted_vline(canvas, 8, 0, 9, color)
        ys, xs = np.nonzero(canvas[:, :, 0])
        self.assertGreater(len(xs), 0)
        self.assertTrue(np.all((xs - ys) % 2 == 0))

    def test_text_is_drawn_inside_its_box(self) -> None:
        canvas = new_canvas(80, 30)
        w, h = text_size("1e+06")
        self.assertGreater(w, 0)
        self.assertGreater(h, 0)
        draw_text(canvas, 5, 5, "1e+06", (128, 128, 128, 255))
        ys, xs = np.nonzero(canvas[:, :, 0])
        self.assertGreater(len(xs), 0)
        self.assertGreaterEqual(int(xs.min()), 5)
        self.assertLess(int(xs.max()), 5 + w)


class CliTests(unittest.TestCase):
    def test_parser_reads_axis_options(self) -> None:
        args = build_parser().parse_args(["render", "--x-min", "-2", "--x-max", "2", "--y-min-log", "-1"])
        self.assertEqual((args.x_min, args.x_max), (-2.0, 2.0))
        self.assertEqual(args.y_min_log, -1)
        self.assertIsNone(args.y_max)

    def test_render_command_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "plot.png"
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                code = main(
                    [
                        "render",
                        "--out",
                        str(out),
                        "--width",
                        "200",
                        "--height",
                        "150",
                        "--function",
                        "sin",
                        "--function",
                        "steps",
                        "--zoom-in",
                        "2",
                        "--x-min",
                        "-20",
                        "--x-max",
                        "20",
                    ]
                )
            self.assertEqual(code, 0)
            self.assertTrue(out.exists())
            self.assertIn("plot.png", stdout.getvalue())
            with Image.open(out) as image:
                self.assertEqual(image.size, (200, 150))


if __name__ == "__main__":
    unittest.main()
