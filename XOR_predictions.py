import numpy as np
from mlp import MLP, EarlyStopping
from mlp.helpers.logger import RunLogger


def generate_xor_data(n):
    combos = np.array([list(map(int, format(i, f'0{n}b'))) for i in range(2**n)])
    X = combos.astype(np.float32)  # shape (2^n, n)
    d = (np.sum(combos, axis=1) % 2).reshape(-1, 1)  # odd parity = 1
    return X, d


def run_xor(n, n_hidden, lr, momentum, epochs, batch_size=1, seed=0, log=False):
    X, d = generate_xor_data(n)

    model = MLP(input_width=n, batch_size=batch_size, epochs=epochs,
                epsilon=0.05, verbose=1, seed=seed)
    model.add_layer(n_hidden, learning_rate=lr, momentum=momentum)
    model.add_layer(1, learning_rate=lr, momentum=momentum)

    logger = RunLogger(tag=f"xor{n}") if log else None
    history = model.train(X, d, validate=True,
                          early_stopping=EarlyStopping(patience=epochs // 5 or 1),
                          logger=logger)
    if logger is not None:
        logger.plot_loss(history, tag=f"xor{n}")

    preds = np.array([model.predict(x) for x in X])

    print(f"Predicting XOR for {n} inputs:")
    print(f"XOR-{n} Outputs:", preds.ravel().round(4))
    print(f"Targets:", d.ravel())
    return model


if __name__ == "__main__":
    # Example usage
    model = run_xor(n=2, n_hidden=3, lr=0.5, momentum=0.9, epochs=50)
    model.print_weights()

    run_xor(n=3, n_hidden=8, lr=0.2, momentum=0.9, epochs=200, batch_size=2)
    run_xor(n=4, n_hidden=16, lr=0.05, momentum=0.5, epochs=500, batch_size=4, log=True)
