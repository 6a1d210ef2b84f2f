import unittest
from dataclasses import replace

from captioner.domain.errors import InvalidConfiguration, InvalidInput
from captioner.domain.layout import layout, text_block_height
from captioner.domain.types import LayoutConfig, Line, LinePosition, Rect

BASE = LayoutConfig(margin_sides=36, margin_top=25, outer_padding=20, line_spacing=2,
                    target_image_width=600, square_adjustment=False)


def lines(n, width=100, height=20):
    return [Line(text=f"line {i}", width=width, height=height) for i in range(n)]


class TestLayoutGeometry(unittest.TestCase):
    def test_single_line_example(self) -> None:
        plan = layout([Line("hello there", 100, 20)], BASE, 1200, 800)
        self.assertEqual((plan.canvas_width, plan.canvas_height), (640, 485))
        self.assertEqual(plan.image_rect, Rect(x=20, y=20, w=600, h=400))
        self.assertEqual(plan.line_positions, (LinePosition(x=270, y=445, text="hello there"),))

    def test_lines_centered_independently(self) -> None:
        ls = [Line("a much longer line", 300, 20), Line("short", 51, 20)]
        plan = layout(ls, BASE, 600, 400)
        self.assertEqual([p.x for p in plan.line_positions], [170, 294])

    def test_lines_advance_by_height_and_spacing(self) -> None:
        plan = layout(lines(3), BASE, 600, 400)
        self.assertEqual([p.y for p in plan.line_positions], [445, 467, 489])

    def test_text_block_rounds_up(self) -> None:
        self.assertEqual(text_block_height([Line("x", 10, 10.2)], BASE), 36)
        plan = layout([Line("x", 10, 10.2)], BASE, 600, 400)
        self.assertEqual(plan.canvas_height, 440 + 36)

    def test_scaled_height_truncates(self) -> None:
        plan = layout(lines(1), BASE, 700, 333)
        self.assertEqual(plan.image_rect.h, 285)

    def test_min_line_height_floors_each_line(self) -> None:
        floored = replace(BASE, min_line_height=30)
        plain = layout(lines(2), BASE, 600, 400)
        plan = layout(lines(2), floored, 600, 400)
        self.assertEqual(plan.canvas_height - plain.canvas_height, 20)
        self.assertEqual([p.y for p in plan.line_positions], [445, 477])

    def test_min_line_height_below_measured_is_ignored(self) -> None:
        plan = layout(lines(2), replace(BASE, min_line_height=5), 600, 400)
        self.assertEqual(plan, layout(lines(2), BASE, 600, 400))

    def test_overflowing_line_can_start_left_of_canvas(self) -> None:
        plan = layout([Line("enormous", 800, 20)], BASE, 600, 400)
        self.assertEqual(plan.line_positions[0].x, -80)

    def test_text_never_overlaps_image(self) -> None:
        for n in range(1, 6):
            plan = layout(lines(n), BASE, 640, 480)
            bottom = plan.image_rect.y + plan.image_rect.h
            self.assertGreaterEqual(plan.line_positions[0].y, bottom + BASE.margin_top)
            ys = [p.y for p in plan.line_positions]
            self.assertEqual(ys, sorted(set(ys)))

    def test_height_grows_with_line_count(self) -> None:
        heights = [layout(lines(n), BASE, 600, 400).canvas_height for n in range(1, 8)]
        self.assertEqual(heights, sorted(set(heights)))

    def test_to_dict(self) -> None:
        d = layout(lines(1), BASE, 1200, 800).to_dict()
        self.assertEqual(d["image_rect"], {"x": 20, "y": 20, "w": 600, "h": 400})
        self.assertEqual(d["line_positions"], [{"x": 270, "y": 445, "text": "line 0"}])


class TestSquareAdjustment(unittest.TestCase):
    cfg = LayoutConfig(margin_sides=36, margin_top=24, outer_padding=16, line_spacing=2,
                       target_image_width=600, square_adjustment=True)

    def test_near_square_becomes_square(self) -> None:
        plan = layout(lines(2, width=200, height=30), self.cfg, 600, 600)
        self.assertEqual((plan.canvas_width, plan.canvas_height), (718, 718))
        self.assertEqual(plan.image_rect, Rect(x=59, y=16, w=600, h=600))
        self.assertEqual(plan.line_positions,
                         (LinePosition(259, 640, "line 0"), LinePosition(259, 672, "line 1")))

    def test_ratio_of_exactly_175_becomes_square(self) -> None:
        # 632 x (1020 + 32 + 54) = 632 x 1106 before adjustment
        plan = layout(lines(1, height=30), self.cfg, 600, 1020)
        self.assertEqual((plan.canvas_width, plan.canvas_height), (1106, 1106))

    def test_ratio_just_above_175_stays_rectangular(self) -> None:
        plan = layout(lines(1, height=30), self.cfg, 600, 1021)
        self.assertEqual((plan.canvas_width, plan.canvas_height), (632, 1107))

    def test_tall_canvas_left_alone(self) -> None:
        plan = layout(lines(2, height=30), self.cfg, 600, 1200)
        self.assertEqual(plan.canvas_width, 632)
        self.assertGreater(plan.canvas_height / plan.canvas_width, 1.75)

    def test_wide_canvas_left_alone(self) -> None:
        plan = layout(lines(1), self.cfg, 1200, 400)
        self.assertEqual(plan.canvas_width, 632)
        self.assertLess(plan.canvas_height, plan.canvas_width)

    def test_never_narrows(self) -> None:
        off = replace(self.cfg, square_adjustment=False)
        for h in (200, 400, 600, 800, 1000, 1200):
            adjusted = layout(lines(3), self.cfg, 600, h)
            plain = layout(lines(3), off, 600, h)
            self.assertGreaterEqual(adjusted.canvas_width, plain.canvas_width)
            self.assertEqual(adjusted.canvas_height, plain.canvas_height)
            if adjusted.canvas_width != plain.canvas_width:
                ratio = plain.canvas_height / plain.canvas_width
                self.assertTrue(1.0 <= ratio <= 1.75)


class TestLayoutErrors(unittest.TestCase):
    def test_no_lines(self) -> None:
        with self.assertRaises(InvalidInput):
            layout([], BASE, 600, 400)

    def test_bad_base_image(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            layout(lines(1), BASE, 0, 400)
        with self.assertRaises(InvalidConfiguration):
            layout(lines(1), BASE, -5, 400)

    def test_non_finite_base_image(self) -> None:
        for w, h in ((float("nan"), 400), (600, float("nan")), (float("inf"), 400), (600, float("inf"))):
            with self.assertRaises(InvalidConfiguration):
                layout(lines(1), BASE, w, h)

    def test_bad_target_width(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            layout(lines(1), replace(BASE, target_image_width=0), 600, 400)

    def test_margins_eat_column(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            replace(BASE, margin_sides=300).validate()


if __name__ == "__main__":
    unittest.main()
