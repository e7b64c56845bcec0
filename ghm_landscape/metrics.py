# Landscape metrics on the reclassified gHM raster with pylandstats
# Documentation at - https://pylandstats.readthedocs.io/en/latest/landscape.html

import numpy as np
import pandas as pd
import pylandstats as pls

from .reclassify import GHM_CLASSES, GHM_CLASS_NAMES


def build_landscape(class_arr, res, nodata=0, neighborhood_rule='8'):
    '''
    Wraps a categorical array in a pylandstats Landscape.

    Args:
    - class_arr - 2-D integer array of class labels
    - res - (x, y) cell size, or a single number for square cells
    - nodata - label of cells outside the study area
    - neighborhood_rule - '8' (queen's case) or '4' (rook's case) patch adjacency

    Returns:
    - pylandstats.Landscape
    '''
    if np.isscalar(res):
        res = (res, res)
    return pls.Landscape(
        np.asarray(class_arr),
        res=tuple(res),
        nodata=nodata,
        neighborhood_rule=str(neighborhood_rule)
    )


def number_of_patches(landscape, class_val=None):
    '''
    Number of patches of one class, or of the whole landscape when
    class_val is None. Classes that do not occur have 0 patches.
    '''
    if class_val is not None and class_val not in landscape.classes:
        return 0
    if len(landscape.classes) == 0:
        return 0
    return int(landscape.number_of_patches(class_val=class_val))


def largest_patch_index(landscape, class_val=None):
    '''
    Largest patch index (% of the landscape area taken by the single largest
    patch) of one class, or over all classes when class_val is None.
    Classes that do not occur have an LPI of 0.
    '''
    if class_val is not None and class_val not in landscape.classes:
        return 0.0
    if len(landscape.classes) == 0:
        return 0.0
    return float(landscape.largest_patch_index(class_val=class_val))


def class_metrics_df(landscape, classes=GHM_CLASSES):
    '''
    Number of patches and largest patch index per class.

    Every requested class gets a row, with 0 for classes absent from the
    landscape, so results from different regions line up.
    '''
    rows = []
    for class_val in classes:
        rows.append({
            'class': class_val,
            'class_name': GHM_CLASS_NAMES.get(class_val, str(class_val)),
            'number_of_patches': number_of_patches(landscape, class_val),
            'largest_patch_index': largest_patch_index(landscape, class_val),
        })
    return pd.DataFrame(rows).set_index('class')


def class_proportions(class_arr, classes=GHM_CLASSES, nodata=0):
    '''
    Percentage cover of each class over the valid (non-nodata) cells.
    '''
    class_arr = np.asarray(class_arr)
    valid = class_arr[class_arr != nodata]
    total = valid.size

    proportions = {}
    for class_val in classes:
        count = int(np.count_nonzero(valid == class_val))
        proportions[class_val] = (count / total) * 100 if total else 0.0
    return proportions
