"""
Human modification (gHM) landscape metrics from Google Earth Engine.

Fetches the global Human Modification index for an administrative boundary,
computes its zonal median, reclassifies the pixels into 5 classes and
computes number of patches and largest patch index with pylandstats.
"""

from .boundary import dissolve_boundary, iter_regions, load_boundary, to_ee_geometry
from .config import load_config
from .earth_engine import (download_image, extract_pixels, initialize_earth_engine,
                           load_ghm_image, zonal_statistic)
from .logging_utils import setup_logging
from .metrics import (build_landscape, class_metrics_df, class_proportions,
                      largest_patch_index, number_of_patches)
from .rasterize import GridRaster, write_geotiff, xyz_to_grid
from .reclassify import GHM_BREAKS, GHM_CLASS_NAMES, reclassify_array, reclassify_value
from .workflow import run_batch, run_region, run_workflow

__version__ = "0.1.0"

__all__ = [
    "GHM_BREAKS",
    "GHM_CLASS_NAMES",
    "GridRaster",
    "build_landscape",
    "class_metrics_df",
    "class_proportions",
    "dissolve_boundary",
    "download_image",
    "extract_pixels",
    "initialize_earth_engine",
    "iter_regions",
    "largest_patch_index",
    "load_boundary",
    "load_config",
    "load_ghm_image",
    "number_of_patches",
    "reclassify_array",
    "reclassify_value",
    "run_batch",
    "run_region",
    "run_workflow",
    "setup_logging",
    "to_ee_geometry",
    "write_geotiff",
    "xyz_to_grid",
    "zonal_statistic",
]
