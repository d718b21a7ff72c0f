import os

# headless chart rendering for experiments.py
os.environ.setdefault("MPLBACKEND", "Agg")
