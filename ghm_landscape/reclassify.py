# Reclassification of the continuous gHM index into 5 ordinal classes

import numpy as np

# Lower edges of each class; the last class is closed at 1.0
# [0, 0.01) -> 1, [0.01, 0.1) -> 2, [0.1, 0.4) -> 3, [0.4, 0.7) -> 4, [0.7, 1.0] -> 5
GHM_BREAKS = (0.0, 0.01, 0.1, 0.4, 0.7, 1.0)

GHM_CLASS_NAMES = {
    1: "No modification",
    2: "Low",
    3: "Moderate",
    4: "High",
    5: "Very high"
}

GHM_CLASSES = tuple(GHM_CLASS_NAMES.keys())


def reclassify_value(value):
    '''
    Maps a single gHM value to its class (1 - 5).

    Args:
    - value - gHM value in [0, 1]

    Returns:
    - Integer class label
    '''
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"gHM value {value} outside [0, 1]")

    # Internal breaks only, so 1.0 falls in the last bin
    return int(np.digitize(value, GHM_BREAKS[1:-1])) + 1


def reclassify_array(values, nodata=0):
    '''
    Reclassifies a gHM raster into the 5 gHM classes.

    Steps:
    - NaN cells (no pixel returned from Earth Engine) become nodata
    - Every other cell must lie in [0, 1]
    - Thresholds are applied with the lower edge inclusive

    Args:
    - values - array of gHM values
    - nodata - label written to empty cells, must not clash with a class

    Returns:
    - uint8 array of the same shape with labels 1 - 5 and nodata
    '''
    if not isinstance(nodata, (int, np.integer)) or not 0 <= nodata <= 255:
        raise ValueError(f"nodata value {nodata!r} must be an integer in 0 - 255 (uint8 raster)")
    if nodata in GHM_CLASSES:
        raise ValueError(f"nodata value {nodata} clashes with a gHM class")

    values = np.asarray(values, dtype=float)
    valid = ~np.isnan(values)

    out_of_range = valid & ((values < 0.0) | (values > 1.0))
    if out_of_range.any():
        raise ValueError(
            f"{int(out_of_range.sum())} gHM values outside [0, 1] "
            f"(min {np.nanmin(values):.4f}, max {np.nanmax(values):.4f})"
        )

    classes = np.full(values.shape, nodata, dtype=np.uint8)
    classes[valid] = np.digitize(values[valid], GHM_BREAKS[1:-1]) + 1
    return classes
