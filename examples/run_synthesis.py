from pprint import pprint
from typing import Dict

import numpy as np
import matplotlib.pyplot as plt

from vegforcing import (
    SoilLayers,
    StandPropertyTable,
    VegetationModel,
    VegetationParams,
)
from vegforcing.core.roots import relative_root_density

Array = np.ndarray

START_DATE = "2002-04-01"
END_DATE = "2006-10-31"

# lower layer boundaries of a forest soil profile [m]
SOIL = SoilLayers(
    [-0.02, -0.05, -0.1, -0.2, -0.3, -0.4, -0.5, -0.65, -0.8, -1.0, -1.2,
     -1.4, -1.6]
)


# -----------------------------
# Utility helpers
# -----------------------------
def build_stand_table() -> StandPropertyTable:
    return StandPropertyTable.from_records(
        [
            # year, height, maxlai, sai, densef, age
            (2002, 26.1, 5.2, 1.0, 1.0, 101),
            (2003, 26.4, 4.1, 1.0, 1.0, 102),
            (2004, 26.6, 5.9, 1.0, 0.95, 103),
            (2005, 26.9, 5.6, 1.0, 0.95, 104),
            (2006, 27.1, 5.8, 1.0, 0.95, 105),
        ]
    )


def compare_root_methods(soil: SoilLayers) -> Dict[str, Array]:
    return {
        "betamodel": relative_root_density(
            soil, "betamodel", maxrootdepth=-1.4, beta=0.97
        ),
        "table": relative_root_density(
            soil,
            "table",
            relrootden=[15, 35, 15, 7.5, 4, 12, 2, 2, 0],
            rootdepths=[-0.02, -0.15, -0.35, -0.5, -0.65, -0.9, -1.1, -1.3,
                        -1.6],
        )
        / 100,
        "linear": relative_root_density(
            soil, "linear", maxrootdepth=-1.4, relrootden=0.2
        ),
        "constant": relative_root_density(
            soil, "constant", maxrootdepth=-1.4, relrootden=0.2
        ),
    }


def plot_series(res, keys=("lai", "height", "densef")) -> None:
    frame = res.to_frame()
    fig, axes = plt.subplots(len(keys), 1, figsize=(10, 8), sharex=True)
    for ax, key in zip(axes, keys):
        ax.plot(frame.index, frame[key])
        ax.set_ylabel(key)
    axes[-1].set_xlabel("Date")
    plt.show()


def plot_roots(profiles: Dict[str, Array], soil: SoilLayers) -> None:
    plt.figure(figsize=(6, 8))
    for name, dens in profiles.items():
        plt.step(dens, soil.lower, where="post", label=f"'{name}'")
    plt.xlabel("relative root density")
    plt.ylabel("soil depth [m]")
    plt.legend(loc="lower right")
    plt.show()


if __name__ == "__main__":
    params = VegetationParams.beech().with_overrides(
        lai_method="coupmodel",
        winlaifrac=0.1,
        standprop_interp="growthperiod",
        maxrootdepth=-1.4,
    )
    model = VegetationModel.from_dates(
        START_DATE, END_DATE, soil=SOIL, params=params,
        table=build_stand_table(),
    )
    res = model.evolve()

    pprint(res.to_frame().describe())
    pprint(dict(zip(res.years.tolist(), res.maxlai.tolist())))

    plot_series(res)
    plot_roots(compare_root_methods(SOIL), SOIL)
