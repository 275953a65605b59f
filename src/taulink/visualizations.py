"""
Visualisations pour TauLink.

Génère:
1. La courbe de vraisemblance L(tau) et sa version normalisée L / L_max
2. Le tableau TSV de la courbe et le détail par fondateur
"""

import os

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def curve_to_frame(curve):
    """Courbe [(tau, L)] → DataFrame avec colonnes tau, likelihood, relative."""
    df = pd.DataFrame(curve, columns=['tau', 'likelihood'])
    l_max = df['likelihood'].max() if len(df) else 0.0
    df['relative'] = df['likelihood'] / l_max if l_max > 0 else 0.0
    return df


def plot_likelihood_curve(curve, output_dir, tau_hat=None, title=None):
    """
    Trace L(tau) et L(tau) / L_max.

    Parameters
    ----------
    curve : list of (tau, likelihood)
    output_dir : str
    tau_hat : float, optional
        Estimateur du maximum de vraisemblance, marqué sur les deux panneaux

    Returns
    -------
    filepath : str
    """
    os.makedirs(output_dir, exist_ok=True)
    df = curve_to_frame(curve)

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 8), sharex=True)

    ax1.plot(df['tau'], df['likelihood'], color='#377eb8', linewidth=1.5,
             marker='o', markersize=3)
    ax1.set_ylabel('Vraisemblance L(τ)', fontsize=12)
    ax1.set_title(title or 'Vraisemblance de la probabilité de transmission',
                  fontsize=14, fontweight='bold')
    ax1.grid(True, alpha=0.3)

    ax2.plot(df['tau'], df['relative'], color='#e41a1c', linewidth=1.5)
    ax2.axhline(y=np.exp(-1.92), color='grey', linestyle='--', linewidth=1,
                alpha=0.7, label='Support 95% (ΔlogL = 1.92)')
    ax2.set_ylabel('L(τ) / L_max', fontsize=12)
    ax2.set_xlabel('τ', fontsize=12)
    ax2.set_xlim(0.0, 1.0)
    ax2.grid(True, alpha=0.3)

    if tau_hat is not None and np.isfinite(tau_hat):
        for ax in (ax1, ax2):
            ax.axvline(x=tau_hat, color='#4daf4a', linestyle=':', linewidth=1.2,
                       label=f'τ̂ = {tau_hat:.3f}')
    ax2.legend(loc='upper left', fontsize=8)

    plt.tight_layout()
    filepath = os.path.join(output_dir, 'likelihood_curve.png')
    plt.savefig(filepath, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"  → {filepath}")
    return filepath


def generate_results_table(curve, output_dir, terms_by_tau=None):
    """
    Génère le tableau de la courbe en TSV.

    Parameters
    ----------
    curve : list of (tau, likelihood)
    output_dir : str
    terms_by_tau : dict {tau: {founder_id: term}}, optional
        Ajoute une colonne term_<founder> par fondateur

    Returns
    -------
    filepath : str
    """
    os.makedirs(output_dir, exist_ok=True)
    df = curve_to_frame(curve)

    if terms_by_tau:
        founders = sorted({f for terms in terms_by_tau.values() for f in terms})
        for founder in founders:
            df[f'term_{founder}'] = [terms_by_tau.get(t, {}).get(founder, np.nan)
                                     for t in df['tau']]

    filepath = os.path.join(output_dir, 'likelihood_curve.tsv')
    df.to_csv(filepath, sep='\t', index=False, float_format='%.6g')
    print(f"  → {filepath}")
    return filepath
