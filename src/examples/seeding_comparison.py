"""
Comparison of seeding strategies and input representations for kd-kmeans.

This example demonstrates:
1. K-means++ seeding
2. Greedy K-means++ seeding (several candidates per centre)
3. Uniform random seeding
4. Clustering spherical summaries instead of the raw points

Also reports how many centre comparisons the kd-tree filter needed compared
with checking every centre against every point.
"""

import torch
import matplotlib.pyplot as plt
import numpy as np
from time import time

# Add parent directory to path
import sys
sys.path.append('..')

from kdkmeans import KMeans, SphericalCluster, plot_clusters_2d, plot_kdtree_boxes


def generate_blobs(n_samples=2000, n_features=2, n_clusters=6, spread=60.0,
                   std=2.0, random_state=42):
    """Generate isotropic Gaussian blobs with shuffled rows."""
    gen = torch.Generator()
    gen.manual_seed(random_state)

    samples_per_cluster = n_samples // n_clusters
    data_list = []
    true_labels = []

    for k in range(n_clusters):
        mean = (torch.rand(n_features, generator=gen, dtype=torch.float64) - 0.5) * spread
        points = mean + std * torch.randn(samples_per_cluster, n_features,
                                          generator=gen, dtype=torch.float64)
        data_list.append(points)
        true_labels.extend([k] * samples_per_cluster)

    X = torch.cat(data_list, dim=0)
    true_labels = torch.tensor(true_labels)

    perm = torch.randperm(len(X), generator=gen)
    return X[perm], true_labels[perm]


def summarise(X, n_groups=200, random_state=0):
    """Compress X into spherical clusters with a quick fine-grained k-means."""
    fine = KMeans(n_clusters=n_groups, max_iter=20, random_state=random_state).fit(X)
    return [SphericalCluster.from_points(group)
            for group in fine.clusters() if len(group) > 0]


def evaluate_algorithm(algorithm, X, true_labels, name):
    """Fit algorithm and compute metrics."""
    print(f"\n{'='*50}")
    print(f"Testing {name}")
    print('='*50)

    start_time = time()
    algorithm.fit(X)
    fit_time = time() - start_time

    from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score
    ari = nmi = float('nan')
    if true_labels is not None:
        labels = algorithm.labels_
        ari = adjusted_rand_score(true_labels.numpy(), labels.numpy())
        nmi = normalized_mutual_info_score(true_labels.numpy(), labels.numpy())

    # Fraction of point-centre comparisons the filter avoided
    n_points = len(algorithm.labels_)
    comparisons = sum(r.comparisons for r in algorithm.history_)
    brute_force = n_points * algorithm.n_clusters * algorithm.n_iter_
    pruned = 1.0 - comparisons / brute_force

    results = {
        'name': name,
        'time': fit_time,
        'iterations': algorithm.n_iter_,
        'ari': ari,
        'nmi': nmi,
        'inertia': algorithm.inertia_,
        'pruned': pruned
    }

    print(f"Fit time: {fit_time:.3f}s")
    print(f"Iterations: {algorithm.n_iter_} (converged: {algorithm.converged_})")
    if true_labels is not None:
        print(f"ARI: {ari:.3f}")
        print(f"NMI: {nmi:.3f}")
    print(f"Inertia: {algorithm.inertia_:.2f}")
    print(f"Comparisons avoided: {100 * pruned:.1f}%")

    return results


def plot_comparison(results_list):
    """Bar charts of quality and cost per run."""
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    names = [r['name'] for r in results_list]

    ax = axes[0]
    inertias = [r['inertia'] for r in results_list]
    ax.bar(names, inertias)
    ax.set_ylabel('Objective Value')
    ax.set_title('Final Objective')

    ax = axes[1]
    iters = [r['iterations'] for r in results_list]
    bars = ax.bar(names, iters)
    ax.set_ylabel('Iterations')
    ax.set_title('Convergence Speed')
    for bar, val in zip(bars, iters):
        ax.text(bar.get_x() + bar.get_width()/2, bar.get_height() + 0.5,
                f'{val}', ha='center', va='bottom')

    ax = axes[2]
    pruned = [100 * r['pruned'] for r in results_list]
    ax.bar(names, pruned)
    ax.set_ylabel('Comparisons avoided (%)')
    ax.set_title('kd-tree Filtering')
    ax.set_ylim(0, 100)

    for ax in axes:
        ax.tick_params(axis='x', rotation=45)

    plt.tight_layout()
    return fig


def main():
    """Run the comparison."""
    print("Generating synthetic data...")
    X, true_labels = generate_blobs()
    print(f"Data shape: {X.shape}")

    n_clusters = 6
    max_iter = 100
    random_state = 42

    algorithms = [
        (KMeans(n_clusters=n_clusters, max_iter=max_iter, random_state=random_state),
         "K-means++"),
        (KMeans(n_clusters=n_clusters, max_iter=max_iter, random_state=random_state,
                n_local_trials=4),
         "Greedy K-means++"),
        (KMeans(n_clusters=n_clusters, init='random', max_iter=max_iter,
                random_state=random_state),
         "Random")
    ]

    results = []
    for algo, name in algorithms:
        results.append(evaluate_algorithm(algo, X, true_labels, name))

    # Same problem on compressed input
    summaries = summarise(X)
    print(f"\nCompressed {len(X)} points into {len(summaries)} spherical clusters")
    spherical = KMeans(n_clusters=n_clusters, max_iter=max_iter, random_state=random_state)
    results.append(evaluate_algorithm(spherical, summaries, None, "Spherical"))

    print("\n" + "="*50)
    print("SUMMARY")
    print("="*50)
    plot_comparison(results)

    best = algorithms[0][0]
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    plot_clusters_2d(X, best.labels_, best.cluster_centers_, ax=axes[0],
                     title="K-means++ result")
    plot_kdtree_boxes(best.engine_.tree, max_depth=6, ax=axes[1],
                      title="kd-tree cells (depth <= 6)")
    plt.tight_layout()
    plt.show()

    print("\nComparison complete!")


if __name__ == "__main__":
    main()
