"""
Tests for EditorConfig and ConfigManager.
"""
import json
import unittest
import tempfile
from pathlib import Path

from constants import MAX_LAYERS, JPEG_QUALITY
from models.editor_config import EditorConfig
from services.config_operations import ConfigManager


class TestEditorConfig(unittest.TestCase):
    """Dict conversion and validation"""

    def test_defaults(self):
        config = EditorConfig()
        self.assertEqual(config.max_layers, MAX_LAYERS)
        self.assertEqual(config.jpeg_quality, JPEG_QUALITY)
        self.assertEqual(config.recent_files, [])

    def test_round_trip(self):
        config = EditorConfig(max_layers=4, canvas_width=320, canvas_height=200,
                              gb7_use_mask=True, jpeg_quality=80, recent_files=['a.png'])
        self.assertEqual(EditorConfig.from_dict(config.to_dict()), config)

    def test_invalid_values_fall_back(self):
        config = EditorConfig.from_dict({
            'max_layers': 0,
            'canvas_width': 'wide',
            'gb7_use_mask': 'yes',
            'jpeg_quality': 500,
            'recent_files': ['ok.png', 3],
            'unknown_key': True,
        })
        self.assertEqual(config.max_layers, MAX_LAYERS)
        self.assertEqual(config.canvas_width, EditorConfig().canvas_width)
        self.assertFalse(config.gb7_use_mask)
        self.assertEqual(config.jpeg_quality, 95)
        self.assertEqual(config.recent_files, ['ok.png'])

    def test_non_dict(self):
        self.assertEqual(EditorConfig.from_dict([1, 2]), EditorConfig())


class TestConfigManager(unittest.TestCase):
    """Loading, saving and recent files"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.manager = ConfigManager(config_dir=self.dir / 'cfg', max_recent_files=3)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_gives_defaults(self):
        self.assertEqual(self.manager.load(), EditorConfig())

    def test_corrupt_file_gives_defaults(self):
        self.manager.config_dir.mkdir(parents=True)
        self.manager.config_file.write_text('{not json', encoding='utf-8')
        self.assertEqual(self.manager.load(), EditorConfig())

    def test_save_and_load(self):
        self.manager.config.max_layers = 5
        self.manager.config.gb7_use_mask = True
        self.manager.save()

        data = json.loads(self.manager.config_file.read_text(encoding='utf-8'))
        self.assertEqual(data['max_layers'], 5)

        reloaded = ConfigManager(config_dir=self.manager.config_dir).load()
        self.assertEqual(reloaded.max_layers, 5)
        self.assertTrue(reloaded.gb7_use_mask)

    def test_recent_files_order_and_limit(self):
        paths = []
        for name in ('a.png', 'b.png', 'c.png', 'd.png'):
            path = self.dir / name
            path.write_bytes(b'')
            paths.append(str(path))
            self.manager.add_recent_file(path)
        self.manager.add_recent_file(paths[1])

        self.assertEqual(self.manager.config.recent_files, [paths[1], paths[3], paths[2]])

    def test_missing_recent_files_dropped_on_load(self):
        kept = self.dir / 'kept.png'
        kept.write_bytes(b'')
        self.manager.config.recent_files = [str(kept), str(self.dir / 'gone.png')]
        self.manager.save()
        self.assertEqual(self.manager.load().recent_files, [str(kept)])

    def test_clear_recent_files(self):
        self.manager.add_recent_file(self.dir / 'x.png')
        self.manager.clear_recent_files()
        self.assertEqual(self.manager.config.recent_files, [])


class TestLoggerRaise(unittest.TestCase):
    """Release-mode error reporting"""

    def setUp(self):
        import utils.logger as logger
        self.logger = logger
        self._debug = logger.DEBUG_MODE
        self.reports = []
        logger.set_error_reporter(lambda title, message: self.reports.append((title, message)))

    def tearDown(self):
        self.logger.DEBUG_MODE = self._debug
        self.logger.set_error_reporter(None)

    def test_debug_mode_just_raises(self):
        self.logger.DEBUG_MODE = True
        with self.assertRaises(OSError):
            self.logger.loggerRaise(OSError("disk full"), "Error saving config")
        self.assertEqual(self.reports, [])

    def test_release_mode_reports_then_raises(self):
        self.logger.DEBUG_MODE = False
        with self.assertRaises(OSError):
            self.logger.loggerRaise(OSError("disk full"), "Error saving config")
        self.assertEqual(self.reports, [("Error", "Error saving config")])

    def test_release_mode_falls_back_to_exception_text(self):
        self.logger.DEBUG_MODE = False
        with self.assertRaises(ValueError):
            self.logger.loggerRaise(ValueError("bad value"), title="Load")
        self.assertEqual(self.reports, [("Load", "bad value")])
