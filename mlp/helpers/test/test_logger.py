import csv
import json
import os
import tempfile
import unittest

import matplotlib
matplotlib.use("Agg")
import numpy

from mlp.helpers.logger import RunLogger


class TestRunLogger(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.logger = RunLogger(root=self._tmp.name, tag="unit")

    def tearDown(self):
        self._tmp.cleanup()

    def test_run_directory_created(self):
        self.assertTrue(self.logger.dir.is_dir())
        self.assertTrue(self.logger.dir.name.startswith("unit_"))

    def test_log_epoch_writes_csv_with_one_header(self):
        self.logger.log_epoch(1, val_error=0.5, time_s=0.1)
        self.logger.log_epoch(2, val_error=0.25, time_s=0.2)

        with open(self.logger.csv_path, newline="") as f:
            rows = list(csv.DictReader(f))

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["epoch"], "1")
        self.assertEqual(float(rows[1]["val_error"]), 0.25)
        self.assertEqual(len(self.logger.metrics), 2)

    def test_log_epoch_accepts_any_metrics(self):
        row = self.logger.log_epoch(3, loss=1, acc=0.5)
        self.assertEqual(row, {"epoch": 3, "loss": 1.0, "acc": 0.5})

    def test_save_json(self):
        self.logger.log_epoch(1, val_error=0.5)
        path = self.logger.save_json()
        with open(path) as f:
            data = json.load(f)
        self.assertEqual(data, [{"epoch": 1, "val_error": 0.5}])

    def test_save_checkpoint_last_and_best(self):
        last = self.logger.save_checkpoint({"p0": numpy.full(3, 1.0)})
        self.assertEqual(last, str(self.logger.last_ckpt))
        self.assertFalse(self.logger.best_ckpt.exists())

        best = self.logger.save_checkpoint({"p0": numpy.full(3, 2.0)},
                                           best=True)
        self.assertEqual(best, str(self.logger.best_ckpt))

        with numpy.load(self.logger.last_ckpt) as data:
            numpy.testing.assert_array_equal(data["p0"], 1.0)
        with numpy.load(self.logger.best_ckpt) as data:
            numpy.testing.assert_array_equal(data["p0"], 2.0)

    def test_plot_loss(self):
        path = self.logger.plot_loss({"val_error": [3.0, 2.0, 1.5]},
                                     tag="xor")
        self.assertTrue(os.path.exists(path))
        self.assertTrue(path.endswith("val_error_xor_epochs_3.png"))

    def test_plot_loss_total_epochs(self):
        path = self.logger.plot_loss({"val_error": [1.0, 0.5]},
                                     total_epochs=10)
        self.assertTrue(path.endswith("val_error_run_epochs_10.png"))

    def test_plot_loss_without_history(self):
        self.assertIsNone(self.logger.plot_loss({"val_error": []}))
        self.assertIsNone(self.logger.plot_loss({}))
