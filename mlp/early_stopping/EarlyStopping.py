import numpy as np


class EarlyStopping:
    """
    Stops training once the monitored validation metric has not improved
    for `patience` consecutive epochs.

    The stopper keeps a copy of the weights and gradient accumulators seen
    at the best epoch and, if `restore_best_weights` is set, writes them
    back into the model when it decides to stop.
    """
    def __init__(
        self,
        patience=5,
        min_delta=0.0,
        monitor="val_error",
        mode="min",
        restore_best_weights=True,
    ):
        if mode not in ("min", "max"):
            raise ValueError(f"mode must be 'min' or 'max', got {mode!r}")
        if patience < 1:
            raise ValueError("patience must be at least 1")
        self.monitor = monitor
        self.mode = mode
        self.patience = int(patience)
        self.min_delta = float(min_delta)
        self.restore_best_weights = restore_best_weights
        self.reset()

    def reset(self):
        # MLP.train can be called repeatedly; each call starts a fresh watch
        self.best = None
        self.best_epoch = -1
        self.wait = 0
        self.stopped = False
        self._best_snapshot = None

    def improved(self, value):
        if not np.isfinite(value):
            return False
        if self.best is None:
            return True
        if self.mode == "min":
            return value < self.best - self.min_delta
        return value > self.best + self.min_delta

    def update(self, epoch, metrics, model):
        """
        Record `metrics[self.monitor]` for `epoch`. Returns True when
        training should stop.
        """
        value = float(metrics[self.monitor])
        if self.improved(value):
            self.best = value
            self.best_epoch = epoch
            self.wait = 0
            self._best_snapshot = model._snapshot_params()
            return False

        self.wait += 1
        if self.wait < self.patience:
            return False

        self.stopped = True
        if self.restore_best_weights and self._best_snapshot is not None:
            model._load_params(self._best_snapshot)
        return True
