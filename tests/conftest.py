import matplotlib

# Viewer tests run without a display
matplotlib.use("Agg")
