class Layer:
    # Subclasses override as needed
    def forward(self, inputs):
        raise NotImplementedError

    def adjust_as_output_layer(self, expected, inputs):
        raise NotImplementedError

    def adjust_as_hidden_layer(self, next_layer, inputs):
        raise NotImplementedError

    def apply_momentum(self):
        pass

    def update_weights(self):
        pass

    def params(self):
        # Return list of parameter ndarrays (e.g., [weights])
        return []

    def grads(self):
        # Return list of gradient ndarrays matching params()
        return []
