# Turning extracted (longitude, latitude, value) triples into a regular grid

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd
import rasterio
from affine import Affine
from rasterio.transform import from_origin


@dataclass
class GridRaster:
    array: np.ndarray
    transform: Affine
    crs: str = "EPSG:4326"
    nodata: Optional[float] = None

    @property
    def shape(self):
        return self.array.shape

    @property
    def res(self):
        return (self.transform.a, -self.transform.e)

    def bounds(self):
        # (west, south, east, north)
        height, width = self.array.shape
        west, north = self.transform @ (0, 0)
        east, south = self.transform @ (width, height)
        return (west, south, east, north)


def infer_resolution(coords, decimals=9):
    '''
    Smallest positive spacing between distinct coordinates.

    Coordinates are rounded before differencing to drop floating point noise.
    '''
    unique = np.unique(np.round(np.asarray(coords, dtype=float), decimals))
    if unique.size < 2:
        return None
    diffs = np.diff(unique)
    diffs = diffs[diffs > 0]
    return float(diffs.min()) if diffs.size else None


def xyz_to_grid(df: pd.DataFrame, res=None, crs: str = "EPSG:4326",
                x_col: str = "longitude", y_col: str = "latitude",
                value_col: str = "value") -> GridRaster:
    '''
    Rasterizes a table of pixel centres into a north-up grid.

    Args:
    - df - table of pixel centres and values
    - res - (x, y) cell size, or a single number; inferred from the coordinate
      spacing when not given
    - crs - coordinate reference system of the coordinates

    Returns:
    - GridRaster with NaN in cells that no row falls in
    '''
    if df is None or len(df) == 0:
        raise ValueError("Cannot rasterize an empty table of pixels")

    xs = df[x_col].to_numpy(dtype=float)
    ys = df[y_col].to_numpy(dtype=float)
    values = df[value_col].to_numpy(dtype=float)

    if res is None:
        res_x = infer_resolution(xs)
        res_y = infer_resolution(ys)
        # A single row or column only constrains one axis
        res_x = res_x or res_y
        res_y = res_y or res_x
        if res_x is None:
            raise ValueError("Cannot infer resolution from a single pixel, pass res explicitly")
    elif np.isscalar(res):
        res_x = res_y = float(res)
    else:
        res_x, res_y = (float(r) for r in res)

    if res_x <= 0 or res_y <= 0:
        raise ValueError(f"Resolution must be positive, got ({res_x}, {res_y})")

    x_min, y_max = xs.min(), ys.max()
    cols = np.rint((xs - x_min) / res_x).astype(int)
    rows = np.rint((y_max - ys) / res_y).astype(int)

    width = cols.max() + 1
    height = rows.max() + 1

    array = np.full((height, width), np.nan, dtype=float)
    array[rows, cols] = values

    # Coordinates are pixel centres, the transform anchors the upper left corner
    transform = from_origin(x_min - res_x / 2, y_max + res_y / 2, res_x, res_y)

    return GridRaster(array=array, transform=transform, crs=crs, nodata=np.nan)


def write_geotiff(grid: GridRaster, path: Union[str, Path]) -> Path:
    '''
    Writes a single band GridRaster to a GeoTIFF.
    '''
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    profile = {
        'driver': 'GTiff',
        'height': grid.array.shape[0],
        'width': grid.array.shape[1],
        'count': 1,
        'dtype': grid.array.dtype.name,
        'crs': grid.crs,
        'transform': grid.transform,
    }
    if grid.nodata is not None:
        profile['nodata'] = grid.nodata

    with rasterio.open(path, 'w', **profile) as dst:
        dst.write(grid.array, 1)

    return path
