import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from nacafoil.naca import NacaConfig, naca_airfoil_series4


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    naca_0015 = naca_airfoil_series4("0015", 1.0, 1000)

    # One line per point: x,y_lower,y_upper
    out = Path("OUT.csv")
    np.savetxt(out, naca_0015.coords, delimiter=",", fmt="%.17g")
    print(f"Wrote {len(naca_0015)} points to {out}")

    # Textbook thickness convention for comparison.
    config = NacaConfig(normalise_thickness=True)
    naca_0015_norm = naca_airfoil_series4("0015", 1.0, config=config)
    print(f"{naca_0015_norm.thickness_to_chord=:.4f}")
    print(f"{naca_0015_norm.leading_edge_radius=:.5f}")

    ax = naca_0015_norm.plot(None, "k-")
    plt.show()


if __name__ == "__main__":
    main()
