#!/usr/bin/env python3
"""
TauLink — Vraisemblance de la probabilité de transmission d'un variant rare
==========================================================================

Calcule L(τ) pour un pedigree, sous l'hypothèse qu'un seul fondateur a
introduit le variant, à partir du statut porteur des affectés génotypés.

Usage:
    taulink --ped family.ped --config carriers.tsv
    taulink --ped family.ped --carriers 7 8 --non-carriers 9 --tau 0.75
"""

import argparse
import os
import sys
import time

import numpy as np

from taulink.config import TAU_VALUES
from taulink.data_parser import load_all_data
from taulink.errors import TauLinkError
from taulink.likelihood_engine import TransmissionAnalysis
from taulink.pedigree import Pedigree
from taulink.visualizations import plot_likelihood_curve, generate_results_table


def build_parser():
    parser = argparse.ArgumentParser(
        description='TauLink — Vraisemblance de la probabilité de transmission',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemples:
  # Courbe de vraisemblance sur la grille par défaut (pas de 0.05)
  taulink --ped data/family.ped --config data/carriers.tsv

  # Une seule valeur de tau, avec le détail par fondateur
  taulink --ped data/family.ped --carriers 7 8 --non-carriers 9 --tau 0.75 --terms
        """
    )

    parser.add_argument('--ped', default='data/family.ped',
                        help='Fichier pedigree (format LINKAGE) [défaut: data/family.ped]')
    parser.add_argument('--family', default=None,
                        help='Famille à analyser si le fichier pedigree en contient plusieurs')
    parser.add_argument('--config', default=None,
                        help='Configuration observée (TSV: id, state)')
    parser.add_argument('--carriers', nargs='*', type=int, default=[],
                        help='Affectés génotypés porteurs du variant')
    parser.add_argument('--non-carriers', nargs='*', type=int, default=[],
                        help='Affectés génotypés non porteurs')
    parser.add_argument('--tau', type=float, default=None,
                        help='Valeur unique de tau (défaut: courbe complète)')
    parser.add_argument('--tau-step', type=float, default=None,
                        help='Pas de la grille de tau (défaut: 0.05)')
    parser.add_argument('--output', default='results',
                        help='Dossier de sortie (défaut: results)')
    parser.add_argument('--terms', action='store_true',
                        help='Afficher le terme de chaque hypothèse fondateur')
    parser.add_argument('--no-plot', action='store_true',
                        help='Ne pas tracer la courbe de vraisemblance')
    parser.add_argument('--progress', action='store_true',
                        help='Barre de progression pendant la courbe')
    return parser


def _tau_grid(step):
    if step is None:
        return TAU_VALUES
    if not 0.0 < step <= 1.0:
        raise ValueError(f"--tau-step doit être dans ]0, 1], reçu {step}")
    # Le pas demandé est respecté : 1.0 n'est inclus que si le pas divise 1
    grid = np.arange(0.0, 1.0 + step / 2, step)
    return np.round(np.clip(grid, 0.0, 1.0), 6)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    print("╔══════════════════════════════════════════════════════════╗")
    print("║     TauLink — Vraisemblance de transmission (τ)          ║")
    print("║        Hypothèse : un seul fondateur introducteur        ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()

    t_start = time.time()

    try:
        # ================================================================
        # 1. Charger les données
        # ================================================================
        data = load_all_data(args.ped, args.config,
                             carriers=args.carriers, non_carriers=args.non_carriers,
                             family=args.family)

        # ================================================================
        # 2. Construire le pedigree
        # ================================================================
        print("\n" + "=" * 60)
        print("STRUCTURE DU PEDIGREE")
        print("=" * 60)
        pedigree = Pedigree.from_records(data['pedigree'])
        pedigree.summary()

        analysis = TransmissionAnalysis(pedigree, data['configuration'])

        # ================================================================
        # 3. Vraisemblance
        # ================================================================
        print("\n" + "=" * 60)
        print("VRAISEMBLANCE")
        print("=" * 60)
        if args.tau is not None:
            _report_single(analysis, args.tau, args.terms)
            print(f"\nTerminé en {time.time() - t_start:.1f} s ✓")
            return 0

        taus = _tau_grid(args.tau_step)
        curve = analysis.sweep(taus, progress=args.progress)
        tau_hat, l_max = analysis.estimate_tau(curve=curve)
        for tau, lik in curve:
            print(f"  τ = {tau:.3f}   L = {lik:.6g}")
        if np.isfinite(tau_hat):
            print(f"\n  ★ τ̂ = {tau_hat:.4f}  (L = {l_max:.6g})")
        else:
            print("\n  Vraisemblance nulle pour tout τ de la grille.")

        # ================================================================
        # 4. Sorties
        # ================================================================
        print("\n" + "=" * 60)
        print("SORTIES")
        print("=" * 60)
        terms_by_tau = None
        if args.terms:
            terms_by_tau = {tau: analysis.hypothesis_terms(tau) for tau, _ in curve}
        generate_results_table(curve, args.output, terms_by_tau)
        if not args.no_plot:
            plot_likelihood_curve(curve, args.output, tau_hat=tau_hat)
    except (TauLinkError, ValueError, OSError) as e:
        parser.error(str(e))

    print(f"\n  Résultats dans: {os.path.abspath(args.output)}/")
    print(f"\nTerminé en {time.time() - t_start:.1f} s ✓")
    return 0


def _report_single(analysis, tau, show_terms):
    lik = analysis.likelihood(tau)
    print(f"  τ = {tau}")
    print(f"  L(τ) = {lik:.6g}")
    if show_terms:
        for founder, term in analysis.hypothesis_terms(tau).items():
            print(f"    fondateur {founder}: {term:.6g}")


if __name__ == '__main__':
    sys.exit(main())
