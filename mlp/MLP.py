import time
import numpy as np

from .layers import PerceptronLayer
from .helpers.activations import mse
from .helpers.errors import (
    DimensionMismatch,
    NotConfigured,
    SizeMismatch,
    TopologyFrozen,
)

# fraction of the examples, by index, used for training; the rest validate
TRAINING_FRACTION = 0.8


class MLP:
    """
    Multilayer perceptron trained by backpropagation with momentum and
    mini-batch weight updates.

    Layers are appended with `add_layer` before the first call to `train`;
    the topology is frozen afterwards. `train` can be called again and
    resumes from the current weights.

    All randomness comes from `rng`, a numpy Generator owned by the
    network (built from `seed` unless one is passed in), so two networks
    built with the same seed and layers train to identical weights.
    """
    def __init__(
        self,
        input_width,
        batch_size,
        epochs,
        epsilon,
        verbose=0,
        seed=None,
        rng=None,
    ):
        if input_width <= 0:
            raise ValueError("input_width must be positive")
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if epochs <= 0:
            raise ValueError("epochs must be positive")

        self.input_width = int(input_width)
        self.batch_size = int(batch_size)
        self.epochs = int(epochs)
        self.epsilon = float(epsilon)
        self.verbose = int(verbose)
        self.rng = np.random.default_rng(seed) if rng is None else rng

        self.layers = []
        # no layers yet, so the network passes its inputs straight through
        self.output_width = self.input_width
        self.trained = False

    def __repr__(self):
        widths = [self.input_width] + [L.output_width for L in self.layers]
        return "<MLP widths=%s>" % "-".join(str(w) for w in widths)

    def add_layer(self, output_width, learning_rate, momentum):
        if self.trained:
            raise TopologyFrozen("Cannot add layers after training started")
        layer = PerceptronLayer(
            self.output_width, output_width, learning_rate, momentum,
            rng=self.rng,
        )
        self.layers.append(layer)
        self.output_width = layer.output_width
        return layer

    def predict(self, inputs):
        """
        Forward `inputs` through every layer. Each layer keeps its output
        cached, which is what the backward pass for the same example reads.
        Returns a copy of the last layer's output.
        """
        out = np.asarray(inputs, dtype=np.float32)
        for i, layer in enumerate(self.layers):
            out = layer.forward(out)
            if self.verbose > 1:
                print(f"Output {i}: " + " ".join(f"{v:.6f}" for v in out))
        return np.array(out)

    def train(self, X, d, validate=False, early_stopping=None, logger=None):
        """
        Parameters
        ----------
        X: sequence of input vectors, each of length `input_width`.

        d: sequence of integer target vectors, each as wide as the last
            layer.

        validate: bool, default=False
            Compute `validate_model` over the held-out tail after every
            epoch. Implied when `early_stopping` or `logger` is given.

        early_stopping: EarlyStopping, default=None
            Consulted after each epoch with {"val_error": ...}.

        logger: RunLogger, default=None
            Receives per-epoch history and checkpoints.

        Returns
        -------
        history: dict
            {"val_error": [...]}, one entry per validated epoch.
        """
        if len(X) != len(d):
            raise SizeMismatch(len(X), len(d))
        if not self.layers:
            raise NotConfigured("Add at least one layer before training")

        self.trained = True
        last_training_index = int(TRAINING_FRACTION * len(X))
        track = validate or early_stopping is not None or logger is not None
        history = {"val_error": []}

        if early_stopping is not None:
            early_stopping.reset()

        if self.verbose > 0:
            print(f"Starting training for {self.epochs} epochs "
                  f"on {last_training_index} examples...")

        log_interval = max(1, self.epochs // 10)
        for ep in range(1, self.epochs + 1):
            t0 = time.time()
            self._batch_update(X, d, last_training_index)
            if not track:
                continue

            val_error = self.validate_model(X, d, last_training_index)
            history["val_error"].append(val_error)

            if self.verbose > 0:
                if ep % log_interval == 0 or ep == 1 or ep == self.epochs:
                    print(f"Epoch {ep}/{self.epochs} - val_error: {val_error:.4f}")

            if logger is not None:
                logger.log_epoch(ep, time_s=time.time() - t0,
                                 val_error=val_error)
                # always save "last"; "best" whenever val_error reaches a new low
                logger.save_checkpoint(self._pack_npz_state(), best=False)
                if ep == 1 or val_error <= np.min(history["val_error"]):
                    logger.save_checkpoint(self._pack_npz_state(), best=True)

            if early_stopping is not None:
                if early_stopping.update(ep, {"val_error": val_error}, self):
                    if self.verbose > 0:
                        if early_stopping.best is None:
                            print(f"Early stopping at epoch {ep:02d}. "
                                  f"No finite val_error seen.")
                        else:
                            print(
                                f"Early stopping at epoch {ep:02d}. "
                                f"Best val_error={early_stopping.best:.4f} "
                                f"at epoch {early_stopping.best_epoch:02d}."
                            )
                    if (logger is not None and early_stopping.restore_best_weights
                            and early_stopping.best is not None):
                        # after restore, "best" reflects the restored weights
                        logger.save_checkpoint(self._pack_npz_state(), best=True)
                    break

        if logger is not None:
            logger.save_json()
        return history

    def _batch_update(self, X, d, last_training_index):
        # decay whatever gradient the previous epoch left behind
        for layer in self.layers:
            layer.apply_momentum()

        i = 0
        while i < last_training_index:
            self.predict(X[i])
            self._backpropagate(X[i], d[i])

            i += 1
            if i % self.batch_size == 0:
                for layer in self.layers:
                    layer.update_weights()

        if i % self.batch_size != 0:
            # flush the partial batch
            for layer in self.layers:
                layer.update_weights()

    def _backpropagate(self, x, expected):
        # Layer k sees the raw input when k == 0, else layer k-1's output.
        # Hidden layers read the deltas the later layer just computed, so
        # the sweep runs from the last layer to the first.
        def inputs_to(k):
            return x if k == 0 else self.layers[k - 1].outputs

        last = len(self.layers) - 1
        self.layers[last].adjust_as_output_layer(expected, inputs_to(last))
        for k in range(last - 1, -1, -1):
            self.layers[k].adjust_as_hidden_layer(self.layers[k + 1],
                                                  inputs_to(k))

    def validate_model(self, X, d, first_validation_index):
        """
        Sum of squared per-unit errors over examples from
        `first_validation_index` on. Errors within `epsilon` of the target
        count as zero.
        """
        if len(X) != len(d):
            raise SizeMismatch(len(X), len(d))

        error = 0.0
        for i in range(first_validation_index, len(X)):
            predicted = self.predict(X[i])
            expected = np.asarray(d[i])
            if expected.shape != predicted.shape:
                raise DimensionMismatch(self.output_width, expected.size,
                                        where="validation targets")
            error += float(np.sum(mse(expected, predicted, self.epsilon)))
        return error

    def print_weights(self):
        for i, layer in enumerate(self.layers):
            print(f"Layer: {i}")
            print(f"Inputs: {layer.input_width} Outputs: {layer.output_width}")
            print(" ".join(f"{w:g}" for w in layer.weights))

    def parameters(self):
        ps = []
        for L in self.layers:
            for p, g in zip(L.params(), L.grads()):
                ps.append([p, g])
        return ps

    # ================== helpers ==================
    def _snapshot_params(self):
        # Copies of every weight buffer and its accumulator, in layer order.
        return [(np.copy(p), np.copy(g)) for p, g in self.parameters()]

    def _load_params(self, snapshot):
        for (p, g), (p_saved, g_saved) in zip(self.parameters(), snapshot):
            p[...] = p_saved
            g[...] = g_saved

    def _pack_npz_state(self):
        arrays = {}
        for i, (p, g) in enumerate(self.parameters()):
            arrays[f"p{i}"] = p
            arrays[f"g{i}"] = g
        return arrays

    # model I/O
    def save(self, path):
        np.savez(path, **self._pack_npz_state())

    def load(self, path):
        """
        Restore weights and accumulators written by `save`. The whole
        checkpoint is checked against the current layers before any buffer
        is overwritten.
        """
        targets = self._pack_npz_state()
        with np.load(path) as data:
            if set(data.files) != set(targets):
                raise DimensionMismatch(len(targets) // 2,
                                        len(data.files) // 2,
                                        where="checkpoint layers")
            loaded = {key: data[key] for key in data.files}

        for key, buf in targets.items():
            if loaded[key].shape != buf.shape:
                raise DimensionMismatch(buf.size, loaded[key].size,
                                        where=f"checkpoint {key}")

        for key, buf in targets.items():
            buf[...] = loaded[key]
