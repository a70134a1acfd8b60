"""
Rate-of-change comparison across ecosystem presets.

For each preset, runs the simulation with no event, with a rapid event
(volcano) and with a gradual event (climate warming) over several seeds, and
reports peak environmental deviation, surviving species and extinctions.
"""

import numpy as np

from speciation.loader import load_all_data
from speciation.simulation import SpeciationSimulation


SCENARIOS = {
    'baseline': None,
    'rapid (volcano)': 'volcano',
    'gradual (climate)': 'climate',
}


def run_scenario(catalog, preset_id: str, event_id, seed: int, ticks: int = 60) -> dict:
    """
    Run one seeded scenario.

    Args:
        catalog: Preloaded catalog
        preset_id: Ecosystem preset
        event_id: Event triggered at generation 0 (None for baseline)
        seed: Base seed
        ticks: Generations to run

    Returns:
        Dict with peak_deviation, alive, extinct, speciated
    """
    sim = SpeciationSimulation(preset_id=preset_id, seed=seed, catalog=catalog, verbose=False)
    if event_id is not None:
        sim.trigger_event(event_id)

    peak = 0.0
    for _ in range(ticks):
        sim.tick()
        peak = max(peak, sim.environment.deviation_from(sim.preset))

    snapshot = sim.get_snapshot()
    return {
        'peak_deviation': peak,
        'alive': snapshot['alive_count'],
        'extinct': snapshot['total_extinct'],
        'speciated': snapshot['total_speciated'],
    }


def main():
    """Run every scenario on every preset."""
    print("=" * 80)
    print("Speciation Scenario Comparison")
    print("=" * 80)
    print()

    catalog = load_all_data()
    seeds = list(range(7))
    rows = []

    for preset_id in catalog.presets:
        print(f"[{preset_id}] {len(SCENARIOS)} scenarios x {len(seeds)} seeds")
        for label, event_id in SCENARIOS.items():
            results = [run_scenario(catalog, preset_id, event_id, seed) for seed in seeds]

            peaks = np.array([r['peak_deviation'] for r in results])
            alive = np.array([r['alive'] for r in results])
            extinct = np.array([r['extinct'] for r in results])

            rows.append({
                'preset': preset_id,
                'scenario': label,
                'peak_p50': np.percentile(peaks, 50),
                'alive_p50': np.percentile(alive, 50),
                'extinct_mean': extinct.mean(),
                'collapsed': int(np.sum(alive == 0)),
            })

    print()
    print("=" * 80)
    print("Summary Table")
    print("=" * 80)
    print()
    print("| Preset     | Scenario           | Peak dev p50 | Alive p50 | Extinct mean | Collapsed |")
    print("|------------|--------------------|--------------|-----------|--------------|-----------|")
    for r in rows:
        print(f"| {r['preset']:10s} | {r['scenario']:18s} | {r['peak_p50']:12.2f} | "
              f"{r['alive_p50']:9.1f} | {r['extinct_mean']:12.2f} | {r['collapsed']:4d}/{len(seeds)} |")

    print()
    print("=" * 80)


if __name__ == '__main__':
    main()
