# pytorch mlp (multi-layer perceptron) used as the reference scoring model
# one network covers regression, binary and multiclass heads

import torch
import torch.nn as nn

class ScoringMLP(nn.Module):
    """
    multi-layer perceptron for tabular feature vectors

    architecture:
        input (n features) → hidden1 (64) → hidden2 (32) → output (n_outputs)

    n_outputs == 1 is a single logit (binary) or a raw value (regression),
    n_outputs > 1 is one logit per class
    """

    def __init__(
        self,
        input_dim: int,
        n_outputs: int = 1,
        hidden_dims: list = None,
        regression: bool = False
    ):
        """
        initialize model

        args:
            input_dim: number of input features
            n_outputs: size of the output layer (1 for binary/regression)
            hidden_dims: list of hidden layer sizes (default [64, 32])
            regression: treat a single output as a raw value instead of a logit
        """
        super().__init__()

        if hidden_dims is None:
            hidden_dims = [64, 32]
        if regression and n_outputs != 1:
            raise ValueError("regression head must have exactly one output")

        self.input_dim = input_dim
        self.n_outputs = n_outputs
        self.regression = regression

        layers = []
        prev_dim = input_dim

        # build hidden layers
        for hidden_dim in hidden_dims:
            layers.append(nn.Linear(prev_dim, hidden_dim))
            layers.append(nn.ReLU())
            layers.append(nn.Dropout(0.3))  # only active in train mode
            prev_dim = hidden_dim

        layers.append(nn.Linear(prev_dim, n_outputs))

        self.network = nn.Sequential(*layers)

    def forward(self, x):
        """
        forward pass

        args:
            x: input tensor of shape (batch_size, input_dim)

        returns:
            raw outputs of shape (batch_size, n_outputs)
        """
        return self.network(x)

    def predict_proba(self, x):
        """
        get score predictions

        args:
            x: input tensor

        returns:
            (batch_size, n_scores) tensor:
            - regression: the raw value
            - binary: [p(0), p(1)] after sigmoid
            - multiclass: softmax probabilities
        """
        with torch.no_grad():
            out = self.forward(x)
            if self.regression:
                return out
            if self.n_outputs == 1:
                p = torch.sigmoid(out)
                return torch.cat([1 - p, p], dim=1)
            return torch.softmax(out, dim=1)

def count_parameters(model):
    """count trainable parameters in model"""
    return sum(p.numel() for p in model.parameters() if p.requires_grad)
