# helpers/logger.py
import numpy as np
import csv, json, datetime, pathlib
import matplotlib.pyplot as plt


class RunLogger:
    """
    Writes one training run to runs/<tag>_<timestamp>/:

      history.csv / history.json   one row per logged epoch
      checkpoint_last.npz          weights after the latest epoch
      checkpoint_best.npz          weights the caller marked as best
      plots/                       validation error curve
    """
    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.best_ckpt = self.dir / "checkpoint_best.npz"
        self.last_ckpt = self.dir / "checkpoint_last.npz"
        self.metrics = []  # list of dicts per epoch
        self._csv_header_written = False

    # ---------- history ----------
    def log_epoch(self, epoch, **kwargs):
        row = {"epoch": int(epoch), **{k: float(v) for k, v in kwargs.items()}}
        self.metrics.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)
        return row

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.metrics, f, indent=2)
        return str(self.json_path)

    # ---------- checkpoints ----------
    def save_checkpoint(self, npz_dict, best=False):
        path = self.best_ckpt if best else self.last_ckpt
        np.savez(path, **npz_dict)
        return str(path)

    # ---------- plotting ----------
    def plot_loss(self, history, tag="run", subdir="plots", total_epochs=None):
        """
        Saves the validation error curve as val_error_<tag>_epochs_<n>.png.
        Returns the path, or None when the history has no "val_error".
        """
        val = history.get("val_error", [])
        if len(val) == 0:
            return None
        if total_epochs is None:
            total_epochs = len(val)

        outdir = self.dir / subdir
        outdir.mkdir(parents=True, exist_ok=True)
        path = outdir / f"val_error_{tag}_epochs_{total_epochs}.png"

        plt.figure()
        plt.plot(np.arange(1, len(val) + 1), val, label="val error")
        plt.xlabel("Epoch")
        plt.ylabel("Squared error (dead zone)")
        plt.title(f"Validation Error vs Epochs ({tag})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)
