from pathlib import Path

# Repo-root conventional directories/files (overrideable via experiment.yaml)
CONFIG_DIR = Path("configs")
EXPERIMENT_FILE = CONFIG_DIR / "experiment.yaml"
TAXONOMY_FILE = CONFIG_DIR / "taxonomy.yaml"

DATA_DIR = Path("dataset")
OUTPUT_ROOT = Path("outputs")
