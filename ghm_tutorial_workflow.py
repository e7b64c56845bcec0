# HUMAN MODIFICATION (gHM) LANDSCAPE WORKFLOW TO RUN IN JUPYTER NOTEBOOKS USING GEE PYTHON API (WITH PLACEHOLDER BOUNDARY AND PROJECT ID)

# Import Libraries
import warnings

import ee

from ghm_landscape import (GHM_CLASS_NAMES, build_landscape, class_metrics_df,
                           dissolve_boundary, extract_pixels, largest_patch_index,
                           load_boundary, load_ghm_image, number_of_patches,
                           reclassify_array, to_ee_geometry, xyz_to_grid,
                           zonal_statistic)
from ghm_landscape.logging_utils import setup_logging

# Supress runtime warnings for a cleaner output
warnings.filterwarnings("ignore", category=RuntimeWarning)

logger = setup_logging('INFO', 'tutorial', format_style='simple')

# Initialise and access my Google Earth Engine Project and session
ee.Authenticate()
ee.Initialize(project='PROJECT ID')

# Pixel size (metres) used for every Earth Engine request; gHM is a ~1km product
SCALE = 1000

# Load the administrative boundary (from local storage) and merge its features
# into one study area polygon
boundary = load_boundary("BOUNDARY SHAPEFILE")
study_area = to_ee_geometry(dissolve_boundary(boundary))

# GLOBAL HUMAN MODIFICATION DATA
# Dataset - https://developers.google.com/earth-engine/datasets/catalog/CSP_HM_GlobalHumanModification
ghm = load_ghm_image(study_area)
print("Bands:", ghm.bandNames().getInfo())

# Median gHM over the study area (zonal statistic)
ghm_median = zonal_statistic(ghm, study_area, reducer='median', scale=SCALE)
print(f"Median gHM: {ghm_median:.4f}")

# Pull every pixel inside the boundary into local memory as longitude / latitude / value
pixels = extract_pixels(ghm, study_area, scale=SCALE)
print(pixels.head())
print(f"{len(pixels)} pixels, gHM range {pixels['value'].min():.3f} - {pixels['value'].max():.3f}")

# Rasterize the pixel table back into a grid
grid = xyz_to_grid(pixels)
print(f"Grid shape: {grid.shape}, resolution: {grid.res}")

# Reclassify into 5 classes
# [0, 0.01) -> 1, [0.01, 0.1) -> 2, [0.1, 0.4) -> 3, [0.4, 0.7) -> 4, [0.7, 1] -> 5
classes = reclassify_array(grid.array, nodata=0)
for class_val, class_name in GHM_CLASS_NAMES.items():
    print(f"Class {class_val} ({class_name}): {(classes == class_val).sum()} pixels")

# Calculate landscape metrics with pylandstats library
# Documentation at - https://pylandstats.readthedocs.io/en/latest/landscape.html
landscape = build_landscape(classes, res=(SCALE, SCALE), nodata=0)

print(f"Number of patches: {number_of_patches(landscape)}")
print(f"Largest patch index: {largest_patch_index(landscape):.2f} %")

# Same two metrics for each gHM class
print(class_metrics_df(landscape).round(2))
