"""
Basic Correlation Diagram Example

This script demonstrates a simple correlation diagram workflow using the
DXCsystems package: observed diagram, surrogate p-value diagram, and the
significant cells after multiple testing correction.
"""

import numpy as np
import matplotlib.pyplot as plt

from dxcsystems.diagram import compute_diagram, compute_pvalue_diagram
from dxcsystems.surrogates import significant_cells, summarize_pvalue_diagram
from dxcsystems.testdata import make_test_dataframe


def main():
    # ============================================================
    # 1. LOAD DATA
    # ============================================================
    print("Loading data...")

    # Load your data (one sequence per column)
    # data = dxcsystems.load_sequences('data/your_data.tsv')

    # For this example, create synthetic data
    data = make_test_dataframe(n=1000, seed=42)
    x = data['lagged_X'].to_numpy()
    y = data['lagged_Y'].to_numpy()

    print(f"Data shape: {data.shape}")

    # ============================================================
    # 2. CORRELATION DIAGRAM
    # ============================================================
    L, W, tau = 20, 6, 2
    print(f"\nComputing correlation diagram (L={L}, W={W}, tau={tau})...")

    real = compute_diagram(x, y, base_width=L, n_widths=W, tau=tau)
    print(f"Diagram shape: {real.shape}")

    # ============================================================
    # 3. SURROGATE P-VALUE DIAGRAM
    # ============================================================
    print("\nTesting significance with IAAFT surrogates...")

    pvalues = compute_pvalue_diagram(
        x, y, base_width=L, n_widths=W, tau=tau,
        n_surrogates=200,
        parallel=True,
        seed=42,
        real_diagram=real,
        verbose=True
    )

    print(summarize_pvalue_diagram(pvalues).to_string(index=False))

    mask = significant_cells(pvalues, alpha=0.05, correction='fdr')
    print(f"\nSignificant cells (FDR 5%): {mask.sum()} of {mask.size}")

    # ============================================================
    # 4. PLOT
    # ============================================================
    extent = [real.centers[0], real.centers[-1], real.widths[0], real.widths[-1]]

    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    im = axes[0].imshow(real.values, aspect='auto', origin='lower', extent=extent,
                        cmap='RdBu_r', vmin=-1, vmax=1)
    axes[0].set_ylabel('Window width')
    axes[0].set_title('Correlation diagram')
    fig.colorbar(im, ax=axes[0], label='ρ')

    im = axes[1].imshow(np.log10(np.maximum(pvalues.values, 1.0 / pvalues.n_trials)),
                        aspect='auto', origin='lower', extent=extent, cmap='viridis')
    axes[1].set_xlabel('Window center')
    axes[1].set_ylabel('Window width')
    axes[1].set_title('p-value diagram')
    fig.colorbar(im, ax=axes[1], label='log10 p')

    plt.tight_layout()
    plt.savefig('examples/correlation_diagram.png', dpi=150)
    print("Diagram plot saved to: examples/correlation_diagram.png")

    print("\n" + "="*60)
    print("Analysis complete!")
    print("="*60)


if __name__ == "__main__":
    main()
