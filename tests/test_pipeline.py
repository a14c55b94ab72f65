"""
End-to-end: prompt → colors → render / describe / export, plus config loading.
Run from project root: python -m pytest tests/ -v
"""
import sys
import tempfile
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestDescribe(unittest.TestCase):
    """CSS linear-gradient descriptor."""

    def test_ube_mango_coconut(self):
        from flavor_gradient.pipeline import describe
        from flavor_gradient.procedural.parser import colors_from_prompt

        desc = describe(colors_from_prompt("ube, mango, coconut"), 30)
        self.assertEqual(desc.css, "linear-gradient(30deg, #6d4aff 0%, #ffb703 50%, #fef9ef 100%)")
        self.assertEqual(str(desc), desc.css)
        self.assertEqual(desc.stops[1], ("#ffb703", 50.0))
        self.assertEqual(desc.angle, 30.0)

    def test_fractional_percentages(self):
        from flavor_gradient.pipeline import css_gradient

        css = css_gradient(["#000000", "#111111", "#222222", "#333333"], 0)
        self.assertEqual(
            css,
            "linear-gradient(0deg, #000000 0%, #111111 33.33333333333333%, "
            "#222222 66.66666666666666%, #333333 100%)",
        )

    def test_angle_normalized_and_rgb_accepted(self):
        from flavor_gradient.pipeline import css_gradient

        self.assertEqual(
            css_gradient([(255, 0, 0), "#00FF00"], 390),
            "linear-gradient(30deg, #ff0000 0%, #00ff00 100%)",
        )
        self.assertTrue(css_gradient(["#000000", "#ffffff"], -30).startswith("linear-gradient(330deg,"))
        self.assertTrue(css_gradient(["#000000", "#ffffff"], 22.5).startswith("linear-gradient(22.5deg,"))

    def test_short_and_bare_hex_canonicalized(self):
        from flavor_gradient.pipeline import css_gradient

        self.assertEqual(
            css_gradient(["fff", "FFB703", "#0Af"], 0),
            "linear-gradient(0deg, #ffffff 0%, #ffb703 50%, #00aaff 100%)",
        )

    def test_tiny_negative_angle_stays_below_360(self):
        from flavor_gradient.pipeline import css_gradient
        from flavor_gradient.procedural.schema import normalize_angle

        self.assertEqual(normalize_angle(-1e-20), 0.0)
        self.assertEqual(normalize_angle(360), 0.0)
        self.assertLess(normalize_angle(-1e-12), 360.0)
        self.assertTrue(css_gradient(["#000000", "#ffffff"], -1e-20).startswith("linear-gradient(0deg,"))


class TestRender(unittest.TestCase):
    """render(): gradient → smear → overlay, resolution independent."""

    def test_linear_only_equals_gradient(self):
        from flavor_gradient.pipeline import render
        from flavor_gradient.procedural.renderer import new_buffer, paint_gradient
        from flavor_gradient.procedural.schema import EffectParams

        colors = ["#6d4aff", "#ffb703", "#fef9ef"]
        params = EffectParams(gradient_type="linear", pattern="none", angle=30)
        out = render(params, colors, 48, 32)
        self.assertEqual(out.shape, (32, 48, 4))
        np.testing.assert_array_equal(out, paint_gradient(new_buffer(48, 32), 30, colors))

    def test_full_pipeline_is_deterministic(self):
        from flavor_gradient.pipeline import render
        from flavor_gradient.procedural.schema import EffectParams, FbmParams

        params = EffectParams(
            gradient_type="smear", pattern="fractal", smear_strength=0.45,
            fractal_intensity=0.25, fbm=FbmParams(octaves=4, scale=140), seed=7,
        )
        a = render(params, ["#ff4f79", "#4f7cff"], 96, 96)
        b = render(params, ["#ff4f79", "#4f7cff"], 96, 96)
        np.testing.assert_array_equal(a, b)
        self.assertTrue((a[..., 3] == 255).all())

    def test_overlay_runs_last_and_only_brightens(self):
        from flavor_gradient.pipeline import render
        from flavor_gradient.procedural.schema import EffectParams

        base = render(EffectParams(gradient_type="smear", pattern="none"), ["#5c3a21", "#c68642"], 64, 64)
        marbled = render(
            EffectParams(gradient_type="smear", pattern="fractal", fractal_intensity=0.5),
            ["#5c3a21", "#c68642"], 64, 64,
        )
        self.assertTrue((marbled[..., :3] >= base[..., :3]).all())
        self.assertTrue((marbled != base).any())

    def test_short_color_lists_fall_back(self):
        from flavor_gradient.pipeline import render
        from flavor_gradient.procedural.parser import ensure_color_pair
        from flavor_gradient.procedural.schema import EffectParams

        params = EffectParams(gradient_type="linear", pattern="none", angle=0)
        empty = render(params, [], 16, 8)
        default = render(params, ["#ff7a00", "#ffe066"], 16, 8)
        np.testing.assert_array_equal(empty, default)

        single = render(params, ["#ff4f79"], 16, 8)
        paired = render(params, ensure_color_pair(["#ff4f79"]), 16, 8)
        np.testing.assert_array_equal(single, paired)
        self.assertFalse((single[0, 0] == single[0, -1]).all())

    def test_out_of_range_params_are_clamped(self):
        from flavor_gradient.pipeline import render
        from flavor_gradient.procedural.schema import EffectParams, FbmParams

        wild = EffectParams(
            gradient_type="SMEAR", angle=-330, smear_strength=5, pattern="sparkles",
            fractal_intensity=-1, fbm=FbmParams(octaves=40, scale=1),
        )
        tame = EffectParams(gradient_type="smear", angle=30, smear_strength=1, pattern="none")
        colors = ["#7b5cff", "#27c3a8"]
        np.testing.assert_array_equal(render(wild, colors, 40, 40), render(tame, colors, 40, 40))

    def _assert_self_similar(self, params, tolerance):
        from flavor_gradient.pipeline import render

        colors = ["#6d4aff", "#ffb703", "#fef9ef"]
        small = render(params, colors, 512, 512).astype(int)
        large = render(params, colors, 1024, 1024).astype(int)
        for y in range(32, 480, 29):
            for x in range(32, 480, 31):
                diff = np.abs(small[y, x, :3] - large[2 * y, 2 * x, :3])
                self.assertLessEqual(int(diff.max()), tolerance, f"at ({x}, {y})")

    def test_resolution_independent_with_overlay(self):
        from flavor_gradient.procedural.schema import EffectParams, FbmParams

        params = EffectParams(
            gradient_type="linear", pattern="fractal", fractal_intensity=0.4,
            angle=30, fbm=FbmParams(octaves=5, scale=140), seed=3,
        )
        self._assert_self_similar(params, 2)

    def test_resolution_independent_with_smear(self):
        from flavor_gradient.procedural.schema import EffectParams

        params = EffectParams(gradient_type="smear", smear_strength=0.45, pattern="none", angle=30)
        self._assert_self_similar(params, 4)


class TestHostHelpers(unittest.TestCase):
    """Preview, PNG encoding/export, seed stepping."""

    def _config(self, tmp: str) -> dict:
        from flavor_gradient.config import _defaults, _merge

        return _merge(_defaults(), {"output": {"dir": tmp, "export_size": 100}})

    def test_render_preview_uses_config(self):
        from flavor_gradient.config import _defaults
        from flavor_gradient.pipeline import render_preview

        buf = render_preview(config=_defaults(), size=64)
        self.assertEqual(buf.shape, (64, 64, 4))
        other = render_preview("strawberry", config=_defaults(), size=64)
        self.assertFalse(np.array_equal(buf, other))

    def test_encode_png(self):
        import io

        from PIL import Image

        from flavor_gradient.pipeline import encode_png, to_image
        from flavor_gradient.procedural.renderer import new_buffer, paint_gradient

        buf = paint_gradient(new_buffer(20, 10), 0, ["#000000", "#ffffff"])
        data = encode_png(buf)
        self.assertTrue(data.startswith(b"\x89PNG"))
        decoded = np.asarray(Image.open(io.BytesIO(data)).convert("RGBA"))
        np.testing.assert_array_equal(decoded, buf)
        self.assertEqual(to_image(buf).size, (20, 10))

    def test_export_png_clamps_size(self):
        from PIL import Image

        from flavor_gradient.pipeline import export_png

        with tempfile.TemporaryDirectory() as tmp:
            path = export_png("ube, mango", Path(tmp) / "out", config=self._config(tmp))
            self.assertEqual(path.suffix, ".png")
            self.assertTrue(path.exists())
            with Image.open(path) as img:
                self.assertEqual(img.size, (512, 512))

    def test_export_png_default_name_and_device_scale(self):
        from PIL import Image

        from flavor_gradient.pipeline import export_png

        with tempfile.TemporaryDirectory() as tmp:
            path = export_png(config=self._config(tmp), export_size=512, device_scale=0.5)
            self.assertEqual(path.parent, Path(tmp))
            self.assertTrue(path.name.startswith("flavor-gradient_"))
            with Image.open(path) as img:
                self.assertEqual(img.size, (256, 256))

    def test_next_seed(self):
        from flavor_gradient.pipeline import next_seed

        self.assertEqual(next_seed(7), 8)


class TestConfig(unittest.TestCase):
    """YAML config and boundary clamping."""

    def test_missing_file_gives_defaults(self):
        from flavor_gradient.config import _defaults, load_config

        self.assertEqual(load_config(Path("/nonexistent/flavor.yaml")), _defaults())

    def test_yaml_merges_over_defaults(self):
        from flavor_gradient.config import effect_params_from_config, load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "c.yaml"
            path.write_text(
                "render:\n  angle: -30\n  fractal_intensity: 2\n  gradient_type: radial\n"
                "  fbm:\n    octaves: 12\n    scale: 10\n",
                encoding="utf-8",
            )
            config = load_config(path)
        self.assertEqual(config["render"]["seed"], 7)
        self.assertEqual(config["output"]["export_size"], 1536)
        params = effect_params_from_config(config)
        self.assertEqual(params.angle, 330.0)
        self.assertEqual(params.fractal_intensity, 1.0)
        self.assertEqual(params.gradient_type, "linear")
        self.assertEqual(params.fbm.octaves, 7)
        self.assertEqual(params.fbm.scale, 40.0)
        self.assertEqual(params.fbm.reference_size, 512)

    def test_default_params_match_app(self):
        from flavor_gradient.config import _defaults, effect_params_from_config

        params = effect_params_from_config(_defaults())
        self.assertEqual(params.gradient_type, "smear")
        self.assertEqual(params.pattern, "fractal")
        self.assertEqual(params.angle, 30.0)
        self.assertEqual(params.seed, 7)
        self.assertTrue(params.smear_enabled)
        self.assertTrue(params.overlay_enabled)

    def test_export_size(self):
        from flavor_gradient.config import resolve_export_size

        self.assertEqual(resolve_export_size(100), 512)
        self.assertEqual(resolve_export_size(5000), 4096)
        self.assertEqual(resolve_export_size(1536, 2), 3072)
        self.assertEqual(resolve_export_size(1536, 10), 4608)
        self.assertEqual(resolve_export_size(1536, None), 1536)
        self.assertEqual(resolve_export_size("abc"), 1536)

    def test_params_round_trip(self):
        from flavor_gradient.procedural.schema import EffectParams

        params = EffectParams(gradient_type="smear", angle=45, seed=3).normalized()
        self.assertEqual(EffectParams.from_dict(params.to_dict()), params)


if __name__ == "__main__":
    unittest.main()
