import unittest

from mlp.early_stopping import EarlyStopping


class FakeModel:
    def __init__(self):
        self.version = 0
        self.loaded = None

    def _snapshot_params(self):
        return self.version

    def _load_params(self, snapshot):
        self.loaded = snapshot


def feed(stopper, model, values):
    """ Returns the epoch at which the stopper asked to stop, or None
    """
    for epoch, value in enumerate(values, start=1):
        model.version = epoch
        if stopper.update(epoch, {"val_error": value}, model):
            return epoch
    return None


class TestEarlyStopping(unittest.TestCase):

    def test_stops_after_patience_and_restores_best(self):
        stopper = EarlyStopping(patience=2)
        model = FakeModel()

        stopped_at = feed(stopper, model, [1.0, 0.5, 0.6, 0.7, 0.1])

        self.assertEqual(stopped_at, 4)
        self.assertTrue(stopper.stopped)
        self.assertEqual(stopper.best, 0.5)
        self.assertEqual(stopper.best_epoch, 2)
        self.assertEqual(model.loaded, 2)

    def test_improvement_resets_wait(self):
        stopper = EarlyStopping(patience=2)
        stopped_at = feed(stopper, FakeModel(), [1.0, 1.1, 0.9, 1.0, 0.8])
        self.assertIsNone(stopped_at)
        self.assertEqual(stopper.best_epoch, 5)

    def test_min_delta(self):
        stopper = EarlyStopping(patience=1, min_delta=0.5)
        stopped_at = feed(stopper, FakeModel(), [1.0, 0.7])
        self.assertEqual(stopped_at, 2)

    def test_max_mode(self):
        stopper = EarlyStopping(patience=1, monitor="score", mode="max")
        model = FakeModel()
        self.assertFalse(stopper.update(1, {"score": 0.5}, model))
        self.assertFalse(stopper.update(2, {"score": 0.7}, model))
        self.assertTrue(stopper.update(3, {"score": 0.6}, model))
        self.assertEqual(stopper.best, 0.7)

    def test_nan_is_never_an_improvement(self):
        stopper = EarlyStopping(patience=1)
        stopped_at = feed(stopper, FakeModel(), [1.0, float("nan")])
        self.assertEqual(stopped_at, 2)

    def test_nan_first_epoch_is_not_kept_as_best(self):
        stopper = EarlyStopping(patience=2)
        model = FakeModel()

        stopped_at = feed(stopper, model, [float("nan"), 1.0])

        self.assertIsNone(stopped_at)
        self.assertEqual(stopper.best, 1.0)
        self.assertEqual(stopper.best_epoch, 2)

    def test_all_nan_stops_without_restoring(self):
        stopper = EarlyStopping(patience=2)
        model = FakeModel()

        stopped_at = feed(stopper, model, [float("nan")] * 3)

        self.assertEqual(stopped_at, 2)
        self.assertIsNone(stopper.best)
        self.assertIsNone(model.loaded)

    def test_no_restore(self):
        stopper = EarlyStopping(patience=1, restore_best_weights=False)
        model = FakeModel()
        feed(stopper, model, [1.0, 2.0])
        self.assertIsNone(model.loaded)

    def test_reset(self):
        stopper = EarlyStopping(patience=1)
        feed(stopper, FakeModel(), [1.0, 2.0])
        stopper.reset()
        self.assertIsNone(stopper.best)
        self.assertFalse(stopper.stopped)
        self.assertEqual(stopper.wait, 0)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            EarlyStopping(mode="sideways")
        with self.assertRaises(ValueError):
            EarlyStopping(patience=0)
