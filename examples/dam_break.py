import os

import jax
from matplotlib import pyplot as plt

from jax_swe import SimulationConfig
from jax_swe.cli import build_simulation
from jax_swe.data_utils import load_snapshot, load_probe


def main(config_path=os.path.join(os.path.dirname(__file__), "dam_break.json")):
    """
    Run the dam-break example and plot the free surface of every snapshot
    and the depth recorded by each probe.

    Arguments:
        config_path - JSON configuration (default dam_break.json next to this file)
    """
    jax.config.update("jax_enable_x64", True)

    config = SimulationConfig.from_file(config_path)
    config.results_dir.mkdir(parents=True, exist_ok=True)

    print("Solving...")
    sim = build_simulation(config)
    result = sim.run()
    print(f"Solve finished at t = {result.final_time:.3f} after {result.n_steps} steps.")

    fig, (ax_snap, ax_probe) = plt.subplots(1, 2, figsize=(10, 4))

    n_snapshots = result.n_steps // config.save_frequency + 1
    for k in range(n_snapshots):
        path = config.results_dir / f"solution_{sim.flux.name}_{k}.txt"
        if not path.exists():
            continue
        data = load_snapshot(path)
        ax_snap.plot(data[:, 0], data[:, 1], label=f"snapshot {k}")
    ax_snap.set_xlabel('x')
    ax_snap.set_ylabel('H = h + z')
    ax_snap.legend()

    for probe in sim.probes:
        samples = load_probe(config.results_dir / f"probe_{probe.reference}.txt")
        ax_probe.plot(samples[:, 0], samples[:, 2], label=f"probe {probe.reference}")
    ax_probe.set_xlabel('t')
    ax_probe.set_ylabel('h')
    ax_probe.legend()

    plt.show()


if __name__ == "__main__":
    main()
