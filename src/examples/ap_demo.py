"""
Demo of affinity propagation.

This example shows how to:
1. Load an integer data matrix (built-in five-point set, or a delimited file)
2. Run affinity propagation with per-round tracing
3. Print the exemplar matrix and the exemplar chosen by each point
"""

import argparse
import sys

import torch

# Add parent directory to path for imports
sys.path.append('..')

from apcluster import AffinityPropagation, read_data_matrix, write_matrix


DEMO_DATA = torch.tensor([
    [3, 4, 3, 2, 1],
    [4, 3, 5, 1, 1],
    [3, 5, 3, 3, 3],
    [2, 1, 3, 3, 2],
    [1, 1, 3, 2, 3],
])


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Affinity propagation demo")
    parser.add_argument('data', nargs='?', default=None,
                        help="Delimited integer data file (default: built-in data)")
    parser.add_argument('--delimiter', default=',', help="Field delimiter")
    parser.add_argument('--damping', type=float, default=0.5)
    parser.add_argument('--max-iter', type=int, default=None)
    parser.add_argument('--verbose', type=int, default=2)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.data is None:
        X = DEMO_DATA
    else:
        X = read_data_matrix(args.data, delimiter=args.delimiter)

    print("Data :")
    write_matrix(X)

    model = AffinityPropagation(damping=args.damping, max_iter=args.max_iter,
                                verbose=args.verbose)
    exemplar_matrix = model.fit_predict(X)

    print(f"\nExemplars ({model.run_state_.value} after {model.n_iter_} rounds) :")
    write_matrix(exemplar_matrix)

    for i, marked in enumerate(model.exemplars_per_row_):
        print(f"point {i} -> exemplar {', '.join(str(e) for e in marked)}")


if __name__ == "__main__":
    main()
