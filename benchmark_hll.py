#!/usr/bin/env python3
import time
import random
import argparse
import matplotlib.pyplot as plt
from hllcount.lib import HyperLogLog, ExactCounter

# Set random seed for reproducibility
random.seed(42)

def generate_data(size, unique_ratio=1.0):
    """Generate test data with controlled uniqueness."""
    if unique_ratio >= 1.0:
        return [f"item_{i}" for i in range(size)]

    unique_count = max(1, int(size * unique_ratio))
    unique_items = [f"unique_item_{i}" for i in range(unique_count)]
    return [random.choice(unique_items) for _ in range(size)]

def benchmark_insert(data_sizes, precisions):
    """Benchmark inserting items into sketches."""
    results = {f"p={p}": [] for p in precisions}

    for size in data_sizes:
        data = generate_data(size)

        for p in precisions:
            sketch = HyperLogLog(precision=p)

            start_time = time.time()
            sketch.add_batch(data)
            elapsed = time.time() - start_time

            results[f"p={p}"].append(elapsed)
            print(f"p={p}: Inserted {size} items in {elapsed:.4f}s")

    return results

def benchmark_estimate(precisions, repeats=10):
    """Benchmark cardinality estimation, which scans every register."""
    results = {}

    for p in precisions:
        sketch = HyperLogLog(precision=p)
        sketch.add_batch(generate_data(10000))

        start_time = time.time()
        for _ in range(repeats):  # Run multiple times for more stable measurements
            sketch.estimate_cardinality()
        elapsed = (time.time() - start_time) / repeats

        results[f"p={p}"] = elapsed
        print(f"p={p}: Estimated over {sketch.num_registers} registers in {elapsed:.6f}s")

    return results

def benchmark_merge(data_sizes, precision=12, repeats=10):
    """Benchmark merging sketches."""
    results = []

    for size in data_sizes:
        sketch1 = HyperLogLog(precision=precision)
        sketch2 = HyperLogLog(precision=precision)
        sketch1.add_batch(generate_data(size, unique_ratio=0.8))
        sketch2.add_batch(generate_data(size, unique_ratio=0.8))

        start_time = time.time()
        for _ in range(repeats):  # Run multiple times for stability
            merged = HyperLogLog(precision=precision)
            merged.merge(sketch1)
            merged.merge(sketch2)
        elapsed = (time.time() - start_time) / repeats

        results.append(elapsed)
        print(f"Merged sketches of {size} items in {elapsed:.6f}s")

    return results

def benchmark_accuracy(data_sizes, precisions):
    """Benchmark estimation accuracy against an exact count."""
    results = {f"p={p}": [] for p in precisions}

    for size in data_sizes:
        data = generate_data(size, unique_ratio=0.5)
        exact = ExactCounter()
        exact.add_batch(data)
        true_count = exact.estimate_cardinality()

        for p in precisions:
            sketch = HyperLogLog(precision=p)
            sketch.add_batch(data)
            estimate = sketch.estimate_cardinality()

            error = abs(estimate - true_count) / true_count * 100
            results[f"p={p}"].append(error)
            print(f"p={p}: Distinct {true_count:.0f}, Estimate {estimate:.2f}, "
                  f"Error {error:.2f}% (expected ~{sketch.standard_error() * 100:.2f}%)")

    return results

def plot_results(title, x_data, y_data, x_label, y_label, legend_loc='upper left'):
    """Plot benchmark results."""
    plt.figure(figsize=(10, 6))

    for name, data in y_data.items():
        plt.plot(x_data, data, marker='o', linewidth=2, label=name)

    plt.title(title)
    plt.xlabel(x_label)
    plt.ylabel(y_label)
    plt.grid(True, linestyle='--', alpha=0.7)
    plt.legend(loc=legend_loc)
    plt.tight_layout()

    # Save to file
    filename = title.lower().replace(' ', '_') + '.png'
    plt.savefig(filename)
    print(f"Saved plot to {filename}")

    plt.close()

def run_benchmarks(plot=True):
    """Run all benchmarks."""
    sizes = [1000, 5000, 10000, 50000, 100000]
    precisions = [8, 12, 16]

    print("\n=== Benchmarking Insert Operation ===")
    insert_results = benchmark_insert(sizes, precisions)

    print("\n=== Benchmarking Cardinality Estimation ===")
    benchmark_estimate(list(range(4, 17)))

    print("\n=== Benchmarking Merge Operation ===")
    merge_results = benchmark_merge(sizes)

    print("\n=== Benchmarking Estimation Accuracy ===")
    accuracy_results = benchmark_accuracy(sizes, precisions)

    if not plot:
        return

    plot_results("HyperLogLog Insert Performance", sizes, insert_results,
                 "Number of Items", "Time (seconds)")
    plot_results("HyperLogLog Merge Performance", sizes, {"p=12": merge_results},
                 "Number of Items per Sketch", "Time (seconds)")
    plot_results("HyperLogLog Estimation Error", sizes, accuracy_results,
                 "Number of Items", "Error (%)", legend_loc='upper right')

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark hllcount HyperLogLog sketches")
    parser.add_argument("--no-plot", action="store_true", help="Skip writing plots")
    args = parser.parse_args()
    run_benchmarks(plot=not args.no_plot)
