# User-tweakable parameters

DEFAULT_ITERATE_MAX = 500

# Classic viewing window
width = 250
height = 250
x_min, x_max = -2.0, 0.5
y_min, y_max = -1.25, 1.25

EVALUATOR = "optimized"   # One of escape_evaluator.EVALUATORS
WORKERS = 1               # Processes used by the grid builder, 1 = serial

LOG_LEVEL = "INFO"

# Validate parameters
if width <= 0 or height <= 0:
    raise ValueError("Width and height must be positive.")
if x_min >= x_max or y_min >= y_max:
    raise ValueError("Window bounds must be increasing.")
if DEFAULT_ITERATE_MAX < 1:
    raise ValueError("DEFAULT_ITERATE_MAX must be at least 1.")
if WORKERS < 1:
    raise ValueError("WORKERS must be at least 1.")
if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR"):
    raise ValueError(f"Unknown LOG_LEVEL: {LOG_LEVEL}")
