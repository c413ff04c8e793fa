"""Application-level constants."""

# Component keys of the per-paper report (credits and confusion matrices)
METADATA_KEY = "metadata"
RESEARCH_FIELD_KEY = "research_field"
RESEARCH_PROBLEM_KEY = "research_problem"
TEMPLATE_KEY = "template"

# Output filenames
REPORT_FILENAME = "accuracy_report.json"
SUMMARY_FILENAME = "summary.json"
TIER_TABLE_FILENAME = "tier_component_table.csv"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"
LOG_FILENAME = "run.log"
