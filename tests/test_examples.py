"""Tests for example scripts."""

import ast
from pathlib import Path

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


class TestBlinkExample:
    def test_script_exists(self):
        assert (EXAMPLES_DIR / "blink" / "blink.py").exists()

    def test_readme_exists(self):
        assert (EXAMPLES_DIR / "blink" / "README.md").exists()

    def test_script_is_valid_python(self):
        ast.parse((EXAMPLES_DIR / "blink" / "blink.py").read_text())

    def test_uses_discovery(self):
        source = (EXAMPLES_DIR / "blink" / "blink.py").read_text()
        assert "require_single_device" in source


class TestPwmFadeExample:
    def test_script_exists(self):
        assert (EXAMPLES_DIR / "pwm-fade" / "fade.py").exists()

    def test_script_is_valid_python(self):
        ast.parse((EXAMPLES_DIR / "pwm-fade" / "fade.py").read_text())

    def test_checks_pwm_support(self):
        source = (EXAMPLES_DIR / "pwm-fade" / "fade.py").read_text()
        assert "PinMode.PWM" in source


class TestProjectReadme:
    def test_readme_exists(self):
        assert (EXAMPLES_DIR.parent / "README.md").exists()

    def test_pyproject_points_at_readme(self):
        source = (EXAMPLES_DIR.parent / "pyproject.toml").read_text()
        assert 'readme = "README.md"' in source
