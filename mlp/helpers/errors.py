class MLPError(Exception):
    """ Base class for errors raised by the mlp package
    """


class DimensionMismatch(MLPError, ValueError):
    """ Raised when a vector or buffer does not have the width a layer
    was configured with
    """
    def __init__(self, expected, actual, where="forward"):
        self.expected = expected
        self.actual = actual
        self.where = where
        super().__init__(
            f"{where}: expected width {expected}, got {actual}"
        )


class SizeMismatch(MLPError, ValueError):
    """ Raised when training inputs and targets have different counts
    """
    def __init__(self, n_inputs, n_targets):
        self.n_inputs = n_inputs
        self.n_targets = n_targets
        super().__init__(
            f"Input vector is not the same size as the output vector "
            f"({n_inputs} inputs, {n_targets} targets)"
        )


class NotConfigured(MLPError):
    """ Raised when training a network that has no layers
    """


class TopologyFrozen(MLPError):
    """ Raised when adding a layer to a network that has already trained
    """
