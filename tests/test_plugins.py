"""Tests for filter plugin loading and fault isolation."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.constants import DEFAULT_PLUGIN_DIR
from RadialScopeViewer.core.errors import PluginError
from RadialScopeViewer.core.plugins import PluginHost
from RadialScopeViewer.core.session import ViewerSession

PLUGIN_DIR = Path(__file__).parent.parent / "RadialScopeViewer" / "filter_plugins"


def _plugin(tmp_path, name, body):
    path = tmp_path / f"{name}.py"
    path.write_text(body)
    return path


def test_plugin_runs_on_a_copy(tmp_path):
    host = PluginHost()
    name = host.load(_plugin(tmp_path, "halve", "def apply_filter(image):\n    image //= 2\n"))
    assert name == "halve"
    assert host.names() == ["halve"]
    assert "radialscope_plugin_halve" not in sys.modules

    src = np.full((2, 2), 100, dtype=np.uint8)
    out = host.apply("halve", src)
    assert (out == 50).all()
    assert (src == 100).all()


def test_plugin_may_return_a_new_array(tmp_path):
    host = PluginHost()
    host.load(_plugin(tmp_path, "top", "def apply_filter(image):\n    return image[:1]\n"))
    out = host.apply("top", np.zeros((4, 4), dtype=np.uint8))
    assert out.shape == (1, 4)


def test_missing_entry_point_is_rejected(tmp_path):
    with pytest.raises(PluginError):
        PluginHost().load(_plugin(tmp_path, "empty", "x = 1\n"))


def test_import_error_is_wrapped(tmp_path):
    with pytest.raises(PluginError):
        PluginHost().load(_plugin(tmp_path, "broken", "import not_a_real_module_xyz\n"))


def test_discover_skips_private_and_broken_files(tmp_path):
    _plugin(tmp_path, "_helper", "def apply_filter(image):\n    pass\n")
    _plugin(tmp_path, "good", "def apply_filter(image):\n    pass\n")
    _plugin(tmp_path, "bad", "raise RuntimeError('nope')\n")
    host = PluginHost()
    assert host.discover(tmp_path) == ["good"]
    assert host.discover(tmp_path / "missing") == []


def test_faulting_plugin_leaves_session_untouched(tmp_path):
    session = ViewerSession(plugin_dir=None)
    session.load_array(np.full((3, 3), 5, dtype=np.uint8))
    assert session.load_plugin(_plugin(tmp_path, "boom", "def apply_filter(image):\n    raise RuntimeError('bad')\n"))

    assert not session.apply_plugin("boom")
    assert (session.state.image == 5).all()
    assert len(session.state.history) == 0
    assert session.sink.last.startswith("Plugin: Plugin boom failed")


def test_close_releases_plugins(tmp_path):
    host = PluginHost()
    host.load(_plugin(tmp_path, "noop", "def apply_filter(image):\n    pass\n"))
    host.close()
    assert host.names() == []
    with pytest.raises(PluginError):
        host.apply("noop", np.zeros((1, 1)))


def test_bundled_invert_plugin():
    session = ViewerSession(plugin_dir=PLUGIN_DIR)
    assert "invert" in session.plugins.names()

    rgba = np.zeros((1, 2, 4), dtype=np.uint8)
    rgba[..., 3] = 10
    session.load_array(rgba)
    assert session.apply_plugin("invert")
    assert (session.state.image[..., :3] == 255).all()
    assert (session.state.image[..., 3] == 10).all()
    assert session.sink.last == "Applied filter invert"


def test_default_plugin_dir_ships_with_the_package():
    assert (DEFAULT_PLUGIN_DIR / "invert.py").is_file()
    assert "invert" in ViewerSession().plugins.names()
