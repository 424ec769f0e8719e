from __future__ import annotations

from contextlib import redirect_stdout
import io
import json
from pathlib import Path
import tempfile
import unittest

from PIL import Image

from curvelab.cli import build_parser, main


GRAPHS_DIR = Path(__file__).resolve().parents[1] / "examples" / "graphs"

BROKEN_GRAPH_TOML = """\
title = "broken"
entrypoint = "graph:build_series"
width = 120
height = 80
"""

BROKEN_GRAPH_PY = """\
from curvelab.expressions import SeriesConfig, compile_series


def _reject(source):
    raise SyntaxError("bad token")


def build_series():
    return compile_series([SeriesConfig("x+*")], _reject)
"""


def _write_broken_graph(root: Path) -> Path:
    graph_dir = root / "broken"
    graph_dir.mkdir()
    (graph_dir / "graph.toml").write_text(BROKEN_GRAPH_TOML, encoding="utf-8")
    (graph_dir / "graph.py").write_text(BROKEN_GRAPH_PY, encoding="utf-8")
    return graph_dir


class CliTests(unittest.TestCase):
    def test_render_writes_png_of_requested_size(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "trig.png"
            stdout = io.StringIO()
            with redirect_stdout(stdout):
                code = main(["render", str(GRAPHS_DIR / "trig"), "--out", str(out), "--width", "320", "--height", "200"])
            self.assertEqual(code, 0)
            self.assertIn("render complete", stdout.getvalue())
            with Image.open(out) as image:
                self.assertEqual(image.size, (320, 200))
                self.assertEqual(image.mode, "RGBA")

    def test_render_honours_pixel_ratio(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "conics.png"
            with redirect_stdout(io.StringIO()):
                code = main(["render", str(GRAPHS_DIR / "conics"), "--out", str(out), "--dpr", "2"])
            self.assertEqual(code, 0)
            with Image.open(out) as image:
                self.assertEqual(image.size, (1600, 1600))

    def test_intercepts_prints_json(self) -> None:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            code = main(["intercepts", str(GRAPHS_DIR / "trig")])
        self.assertEqual(code, 0)
        payload = json.loads(stdout.getvalue())
        self.assertEqual(set(payload), {"intercepts", "intersections"})
        y_intercepts = [p for p in payload["intercepts"] if p["kind"] == "y"]
        # sin(0) = 0, cos(0) = 1 and x^2/10 - 2 at 0 = -2; ln(x) is undefined there.
        self.assertEqual(sorted(p["y"] for p in y_intercepts), [-2.0, 0.0, 1.0])
        self.assertTrue(payload["intersections"])
        self.assertTrue(all(p["description"].startswith("intersection") for p in payload["intersections"]))

    def test_compiled_example_reports_cubic_roots(self) -> None:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            code = main(["intercepts", str(GRAPHS_DIR / "conics")])
        self.assertEqual(code, 0)
        payload = json.loads(stdout.getvalue())
        cubic_roots = sorted(p["x"] for p in payload["intercepts"] if p["series_index"] == 3 and p["kind"] == "x")
        self.assertEqual(len(cubic_roots), 3)
        self.assertAlmostEqual(cubic_roots[0], -(3.0**0.5), delta=1e-2)
        self.assertAlmostEqual(cubic_roots[1], 0.0, delta=1e-2)
        self.assertAlmostEqual(cubic_roots[2], 3.0**0.5, delta=1e-2)

    def test_render_reports_compile_error_and_still_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            graph_dir = _write_broken_graph(Path(td))
            out = Path(td) / "broken.png"
            stdout = io.StringIO()
            with redirect_stdout(stdout), self.assertLogs("curvelab", level="WARNING"):
                code = main(["render", str(graph_dir), "--out", str(out)])
            self.assertEqual(code, 1)
            self.assertIn("render failed: x+*: bad token", stdout.getvalue())
            with Image.open(out) as image:
                self.assertEqual(image.size, (120, 80))

    def test_intercepts_reports_compile_error_as_json(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            graph_dir = _write_broken_graph(Path(td))
            stdout = io.StringIO()
            with redirect_stdout(stdout), self.assertLogs("curvelab", level="WARNING"):
                code = main(["intercepts", str(graph_dir)])
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(stdout.getvalue()), {"error": "x+*: bad token"})

    def test_parser_requires_command(self) -> None:
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            build_parser().parse_args([])


if __name__ == "__main__":
    unittest.main()
