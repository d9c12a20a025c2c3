"""
dataset_loader
~~~~~~~~~~~~~~

Small reference dataset for the trainer: two features per sample,
label 1 for the "negative" cluster and 0 for the "positive" one.
"""
from typing import Dict, List, NamedTuple, Sequence


class Data(NamedTuple):
    """One sample: feature vector and label (unused for prediction)."""
    variables: Sequence[float]
    output: float = 0.0


def load_data() -> List[Data]:
    """Return the training set as a list of Data(variables, output)."""
    return [
        Data([-2.0, -1.0], 1.0),
        Data([25.0, 6.0], 0.0),
        Data([17.0, 4.0], 0.0),
        Data([-15.0, -6.0], 1.0),
    ]


def load_queries() -> Dict[str, Data]:
    """Unlabeled samples used to check predictions after training."""
    return {
        "emily": Data([-7.0, -3.0]),
        "frank": Data([20.0, 2.0]),
    }


def parse_samples(text: str) -> List[Data]:
    """
    Parse one sample per line: `x1, x2, ..., xn, label`.

    Blank lines and lines starting with `#` are ignored. Every sample must
    have the same number of features.
    """
    samples = []
    width = None
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        fields = [f.strip() for f in line.split(",")]
        if len(fields) < 2:
            raise ValueError(
                "line {0}: expected at least one feature and a label".format(lineno)
            )
        try:
            values = [float(f) for f in fields]
        except ValueError:
            raise ValueError("line {0}: non-numeric field in {1!r}".format(lineno, line))

        if width is None:
            width = len(values) - 1
        elif len(values) - 1 != width:
            raise ValueError(
                "line {0}: expected {1} features, got {2}".format(
                    lineno, width, len(values) - 1)
            )
        samples.append(Data(values[:-1], values[-1]))

    return samples
